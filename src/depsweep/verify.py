"""
Staged verification of a mutated module.

    feature probe (once)  ->  cargo check  ->  cargo build --release  ->  doc examples

Each stage returns a ``VerificationOutcome``; the first failure ends the run.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable, List, Set

from .errors import BaselineError
from .outcome import SUCCESS, OutcomeKind, VerificationOutcome
from .runner import CommandResult, CommandRunner

DEFAULT_DOC_FILTER = "__depsweep_no_test_matches_this__"
# cargo's wording when `cargo test --doc` targets a crate with no lib target
NO_LIBRARY_MARKER = "no library targets found"


class FeatureMode(Enum):
    ALL_FEATURES = "all features"
    DEFAULT = "default features"

    def flags(self) -> List[str]:
        return ["--all-features"] if self is FeatureMode.ALL_FEATURES else []


class VerificationPipeline:
    def __init__(
        self,
        runner: CommandRunner,
        cargo: str = "cargo",
        doc_filter: str = DEFAULT_DOC_FILTER,
    ):
        self.runner = runner
        self.cargo = cargo
        self.doc_filter = doc_filter
        self.feature_mode = FeatureMode.DEFAULT
        self.no_doc_modules: Set[Path] = set()

    # -------- commands ---------

    def check_args(self) -> List[str]:
        return [self.cargo, "check", "--all-targets", *self.feature_mode.flags()]

    def build_args(self) -> List[str]:
        return [
            self.cargo,
            "build",
            "--release",
            "--all-targets",
            *self.feature_mode.flags(),
        ]

    def doc_args(self) -> List[str]:
        # The filter matches no test: doc examples get compiled, none run.
        return [
            self.cargo,
            "test",
            "--doc",
            *self.feature_mode.flags(),
            "--",
            self.doc_filter,
        ]

    # -------- session setup ---------

    def probe_feature_mode(self, root: Path) -> FeatureMode:
        """Decide once whether the whole session can run with --all-features."""
        result = self.runner.call(
            [self.cargo, "check", "--all-targets", "--all-features"], cwd=root
        )
        self.feature_mode = FeatureMode.ALL_FEATURES if result.ok else FeatureMode.DEFAULT
        return self.feature_mode

    def baseline(self, modules: Iterable[Path]) -> None:
        """Every module must verify before anything is removed.

        Also records which modules have no documentation-testable library.
        """
        for module_dir in modules:
            for kind, args in (
                (OutcomeKind.CHECK_FAILED, self.check_args()),
                (OutcomeKind.BUILD_FAILED, self.build_args()),
            ):
                result = self.runner.call(args, cwd=module_dir)
                if not result.ok:
                    raise BaselineError(
                        f"baseline {kind.value} in {module_dir} before any removal\n"
                        + result.tail()
                    )
            doc = self.runner.call(self.doc_args(), cwd=module_dir)
            if doc.ok:
                continue
            if NO_LIBRARY_MARKER in doc.output:
                self.no_doc_modules.add(Path(module_dir))
                continue
            raise BaselineError(
                f"baseline doc examples fail to compile in {module_dir}\n" + doc.tail()
            )

    # -------- per candidate ---------

    def has_doc_stage(self, module_dir: Path) -> bool:
        return Path(module_dir) not in self.no_doc_modules

    def verify(self, module_dir: Path) -> VerificationOutcome:
        stages = [
            (OutcomeKind.CHECK_FAILED, self.check_args()),
            (OutcomeKind.BUILD_FAILED, self.build_args()),
        ]
        if self.has_doc_stage(module_dir):
            stages.append((OutcomeKind.DOC_COMPILE_FAILED, self.doc_args()))
        for kind, args in stages:
            result = self.runner.call(args, cwd=module_dir)
            if not result.ok:
                return _failure(kind, result)
        return SUCCESS


def _failure(kind: OutcomeKind, result: CommandResult) -> VerificationOutcome:
    if result.spawn_failed:
        return VerificationOutcome(OutcomeKind.TOOLING_ERROR, result.output.strip())
    return VerificationOutcome(kind, f"`{' '.join(result.args)}` failed\n{result.tail()}")
