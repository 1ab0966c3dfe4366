"""Cross-reference of ANR binder targets against HAL family status."""

from __future__ import annotations

from dataclasses import dataclass
import re

from insight_context.models import AnalysisResult, HALFamily

_PACKAGE_VERSION_SUFFIX_RE = re.compile(r"@[\d.]+.*$")
_FAMILY_VERSION_RE = re.compile(r"@[\d.]+")
_UNKNOWN_INTERFACE = "Unknown"


@dataclass(frozen=True)
class _Target:
    package_name: str
    interface_name: str
    source: str


def _collect_targets(result: AnalysisResult) -> list[_Target]:
    targets: list[_Target] = []
    for anr in result.anr_analyses:
        primary = anr.primary
        if primary is None:
            continue

        binder_target = primary.binder_target
        if binder_target is not None and binder_target.interface_name != _UNKNOWN_INTERFACE:
            targets.append(_Target(binder_target.package_name, binder_target.interface_name, "binder_target"))

        for suspected in primary.suspected_binder_targets:
            targets.append(_Target(suspected.package_name, suspected.interface_name, "suspected"))

    unique: dict[str, _Target] = {}
    for target in targets:
        unique.setdefault(target.package_name, target)
    return list(unique.values())


def package_prefix(package_name: str) -> str:
    """``vendor.foo@2.0`` -> ``vendor.foo``"""
    return _PACKAGE_VERSION_SUFFIX_RE.sub("", package_name, count=1).lower()


def family_prefix(family_name: str) -> str:
    """``vendor.foo::IFoo`` -> ``vendor.foo``"""
    return _FAMILY_VERSION_RE.sub("", family_name.split("::")[0], count=1).lower()


def match_family_by_package(package_name: str, families: list[HALFamily]) -> HALFamily | None:
    prefix = package_prefix(package_name)
    return next((family for family in families if family_prefix(family.family_name) == prefix), None)


def build_hal_cross_reference(result: AnalysisResult) -> list[str]:
    """Summarize the HAL status of every distinct binder target seen in ANR traces."""
    if result.hal_status is None or not result.hal_status.families:
        return []

    entries: list[str] = []
    for target in _collect_targets(result):
        family = match_family_by_package(target.package_name, result.hal_status.families)
        label = f"- {target.interface_name} ({target.package_name}) →"
        if family is None:
            entries.append(f"{label} status unknown (not found in lshal)")
            continue

        oem_tag = " [OEM]" if family.is_oem else ""
        entries.append(
            f"{label} {family.highest_status}, highest={family.highest_version}, "
            f"{family.version_count} version(s){oem_tag}"
        )
    return entries
