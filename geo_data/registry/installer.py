"""
Country Installer
=================

Materializes country datasets into a project's output directory and keeps
the accessor module in sync:

- add: fetch, project and write new countries
- update: re-fetch every installed country
- remove: delete installed countries

Every operation returns an InstallReport with one outcome per country code,
so a presentation layer can render it without re-deriving any policy.
Network failures are recorded per country; filesystem errors while writing
propagate unchanged.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from geo_data.core.config import GeoDataConfig
from geo_data.core.files import write_json_atomic
from geo_data.errors import NetworkError
from .codegen import CodeGenerator, installed_dataset_files
from .schemas import RegistryIndex
from .service import RegistryService, ResolveStatus

logger = logging.getLogger(__name__)


class InstallStatus(str, Enum):
    """What happened to one country code."""
    INSTALLED = "installed"
    REMOVED = "removed"
    PLANNED = "planned"
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    FAILED = "failed"


FAILURE_STATUSES = {InstallStatus.NOT_FOUND, InstallStatus.INVALID, InstallStatus.FAILED}


@dataclass
class InstallOutcome:
    """Outcome for a single country code."""
    code: str
    status: InstallStatus
    label: Optional[str] = None
    message: Optional[str] = None
    suggestion: Optional[str] = None
    size_bytes: int = 0

    @property
    def failed(self) -> bool:
        return self.status in FAILURE_STATUSES

    def __str__(self) -> str:
        text = f"{self.label or self.code.upper()}: {self.status.value}"
        if self.message:
            text += f" ({self.message})"
        return text


@dataclass
class InstallReport:
    """Outcomes of one add / update / remove run."""
    action: str
    outcomes: List[InstallOutcome] = field(default_factory=list)
    generated: Optional[Path] = None
    error: Optional[str] = None
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        return self.error is not None or any(o.failed for o in self.outcomes)

    def with_status(self, status: InstallStatus) -> List[InstallOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


def normalize_codes(codes: Iterable[str]) -> List[str]:
    """Lowercase, strip and de-duplicate codes, keeping their order."""
    seen: List[str] = []
    for code in codes:
        code = code.strip().lower()
        if code and code not in seen:
            seen.append(code)
    return seen


class CountryInstaller:
    """Adds, updates and removes country datasets for one project."""

    def __init__(
        self,
        config: GeoDataConfig,
        service: Optional[RegistryService] = None,
        generator: Optional[CodeGenerator] = None,
    ):
        self.config = config
        self.service = service or RegistryService()
        self.generator = generator or CodeGenerator(config)

    @property
    def output_dir(self) -> Path:
        return self.config.output_path

    def dataset_path(self, code: str) -> Path:
        """Path of a code's dataset; an installed file keeps its on-disk name."""
        code = code.lower()
        name = installed_dataset_files(self.output_dir).get(code, f"{code}.json")
        return self.output_dir / name

    def installed(self) -> List[str]:
        """Sorted codes of the datasets currently in the output directory."""
        return list(installed_dataset_files(self.output_dir))

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def add(self, codes: Iterable[str], force: bool = False, dry_run: bool = False) -> InstallReport:
        """
        Install countries.

        Unknown codes make the whole run fail before anything is written.
        Already-installed codes are skipped unless force is set.
        """
        report = InstallReport(action="add", dry_run=dry_run)
        codes = normalize_codes(codes)

        index = self._load_index(report)
        if index is None:
            return report

        unknown = [c for c in codes if c not in index]
        if unknown:
            for code in unknown:
                report.outcomes.append(InstallOutcome(
                    code=code,
                    status=InstallStatus.NOT_FOUND,
                    message=f"Unknown country code: {code.upper()}",
                    suggestion=index.suggest(code),
                ))
            return report

        installed = set(self.installed())
        for code in codes:
            label = index.get_summary(code).display(code)
            if code in installed and not force:
                report.outcomes.append(InstallOutcome(
                    code=code, status=InstallStatus.SKIPPED, label=label,
                    message="already installed",
                ))
            elif dry_run:
                report.outcomes.append(InstallOutcome(code=code, status=InstallStatus.PLANNED, label=label))
            else:
                report.outcomes.append(self._install(code, index, label))

        if report.with_status(InstallStatus.INSTALLED):
            report.generated = self.generator.generate()
        return report

    def update(self, dry_run: bool = False) -> InstallReport:
        """Re-fetch every installed country and regenerate the module."""
        report = InstallReport(action="update", dry_run=dry_run)
        codes = self.installed()
        if not codes:
            report.error = "No countries installed"
            return report

        index = self._load_index(report)
        if index is None:
            return report

        for code in codes:
            summary = index.get(code)
            if summary is None:
                report.outcomes.append(InstallOutcome(
                    code=code, status=InstallStatus.SKIPPED,
                    message="no longer in the registry",
                ))
                continue
            label = summary.display(code)
            if dry_run:
                report.outcomes.append(InstallOutcome(code=code, status=InstallStatus.PLANNED, label=label))
            else:
                report.outcomes.append(self._install(code, index, label))

        if not dry_run:
            report.generated = self.generator.generate()
        return report

    def remove(self, codes: Iterable[str], dry_run: bool = False) -> InstallReport:
        """Delete installed countries and regenerate the module."""
        report = InstallReport(action="remove", dry_run=dry_run)
        installed = set(self.installed())

        for code in normalize_codes(codes):
            if code not in installed:
                report.outcomes.append(InstallOutcome(
                    code=code, status=InstallStatus.SKIPPED, message="not installed",
                ))
            elif dry_run:
                report.outcomes.append(InstallOutcome(code=code, status=InstallStatus.PLANNED))
            else:
                path = self.dataset_path(code)
                path.unlink()
                logger.debug("Removed %s", path)
                report.outcomes.append(InstallOutcome(code=code, status=InstallStatus.REMOVED))

        if report.with_status(InstallStatus.REMOVED):
            report.generated = self.generator.generate()
        elif not report.with_status(InstallStatus.PLANNED):
            report.error = "Nothing to remove"
        return report

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _load_index(self, report: InstallReport) -> Optional[RegistryIndex]:
        resolution = self.service.resolve_index()
        if not resolution.ok:
            report.error = f"Could not load registry: {resolution.message}"
            return None
        return resolution.value

    def _install(self, code: str, index: RegistryIndex, label: str) -> InstallOutcome:
        try:
            resolution = self.service.resolve_dataset(code, self.config, index=index)
        except NetworkError as e:
            return InstallOutcome(code=code, status=InstallStatus.FAILED, label=label, message=str(e))

        if resolution.status == ResolveStatus.NOT_FOUND:
            return InstallOutcome(code=code, status=InstallStatus.NOT_FOUND, label=label, message=resolution.message)
        if resolution.status == ResolveStatus.INVALID:
            return InstallOutcome(
                code=code, status=InstallStatus.INVALID, label=label,
                message=f"invalid data: {resolution.message}",
            )

        path = self.dataset_path(code)
        size = write_json_atomic(path, resolution.value.to_dict())
        logger.debug("Wrote %s (%d bytes)", path, size)
        return InstallOutcome(code=code, status=InstallStatus.INSTALLED, label=label, size_bytes=size)
