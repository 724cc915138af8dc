"""
Session driver: the speculative remove / verify / reset loop.

For every workspace module and every dependency group, each declared
dependency that survives the ignore policy and the usage oracle is removed
with ``cargo rm``, verified, and the module tree is reset no matter what.
Removals that verified end up in the ledger, never on disk.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import SweepConfig
from .errors import ConfigError
from .groups import ALL_GROUPS, DependencyGroup
from .ledger import Ledger
from .manifest import DependencyEntry, lookup, read_group
from .mutation import MutationApplier
from .oracle import UsageOracle
from .outcome import VerificationOutcome
from .policy import IgnorePolicy
from .runner import CommandRunner
from .vcs import Repository
from .verify import VerificationPipeline
from .workspace import Workspace, discover


@dataclass
class SessionReport:
    modules: int = 0
    candidates: int = 0
    skipped: int = 0
    used: int = 0
    removed: int = 0
    failures: Counter = field(default_factory=Counter)
    output: Optional[Path] = None

    @property
    def failed(self) -> int:
        return sum(self.failures.values())

    def summary_lines(self) -> list[str]:
        lines = [
            f"  modules:    {self.modules}",
            f"  declared:   {self.candidates}",
            f"  ignored:    {self.skipped}",
            f"  in use:     {self.used}",
            f"  removable:  {self.removed}",
            f"  kept:       {self.failed}",
        ]
        for kind, n in sorted(self.failures.items(), key=lambda kv: kv[0].value):
            lines.append(f"    - {kind.value}: {n}")
        return lines


class Session:
    def __init__(
        self,
        root: Path,
        runner: CommandRunner,
        policy: IgnorePolicy,
        oracle: UsageOracle,
        applier: MutationApplier,
        repo: Repository,
        pipeline: VerificationPipeline,
        output: Path,
        cargo: str = "cargo",
    ):
        self.root = Path(root)
        self.runner = runner
        self.policy = policy
        self.oracle = oracle
        self.applier = applier
        self.repo = repo
        self.pipeline = pipeline
        self.output = Path(output)
        self.cargo = cargo
        self.ledger = Ledger(cargo=cargo)
        self.report = SessionReport()

    @classmethod
    def from_config(cls, root: Path, cfg: SweepConfig) -> "Session":
        root = Path(root)
        log_dir = None
        if cfg.log_dir:
            log_dir = (root / cfg.log_dir).resolve()
            # git reset --hard keeps untracked files, so logs inside the tree
            # would dirty the checkout for the next run
            if log_dir == root.resolve() or root.resolve() in log_dir.parents:
                raise ConfigError(
                    f"log_dir {log_dir} is inside the workspace {root}; "
                    "choose a directory outside it"
                )
        runner = CommandRunner(log_dir=log_dir)
        return cls(
            root=root,
            runner=runner,
            policy=IgnorePolicy(),
            oracle=UsageOracle(runner, rg=cfg.tools.rg),
            applier=MutationApplier(runner, cargo=cfg.tools.cargo),
            repo=Repository(runner, git=cfg.tools.git),
            pipeline=VerificationPipeline(
                runner, cargo=cfg.tools.cargo, doc_filter=cfg.doc_filter
            ),
            output=root / cfg.output,
            cargo=cfg.tools.cargo,
        )

    # -------- top level ---------

    def run(self) -> SessionReport:
        self.repo.ensure_available()
        self.repo.ensure_clean(self.root)
        self.oracle.ensure_available()
        self.applier.ensure_available()

        workspace = discover(self.runner, self.root, cargo=self.cargo)
        self.report.modules = len(workspace.modules)

        mode = self.pipeline.probe_feature_mode(workspace.root)
        print(f"✓ Verifying with {mode.value}")
        self._baseline(workspace)

        total = len(workspace.modules)
        for i, module in enumerate(workspace.modules, start=1):
            print(f"[{i}/{total}] {module.name or module.path.name}: {module.path}")
            for group in ALL_GROUPS:
                self.sweep_group(module.path, group)

        self._finish()
        return self.report

    def _baseline(self, workspace: Workspace) -> None:
        print(f"Baseline: verifying {len(workspace.modules)} module(s) before any removal...")
        self.pipeline.baseline([m.path for m in workspace.modules])
        if self.pipeline.no_doc_modules:
            print(
                f"  {len(self.pipeline.no_doc_modules)} module(s) without a library; doc stage skipped there"
            )

    def _finish(self) -> None:
        if len(self.ledger) == 0:
            print("✓ No unused dependencies found.")
        else:
            self.report.output = self.ledger.write(self.output)
            print(
                f"✓ {len(self.ledger)} removable dependenc{'y' if len(self.ledger) == 1 else 'ies'}"
                f" written to {self.report.output}"
            )
        print("Summary:")
        for line in self.report.summary_lines():
            print(line)

    # -------- per module / group / candidate ---------

    def sweep_group(self, module_dir: Path, group: DependencyGroup) -> None:
        declared = read_group(module_dir, group)
        for name in declared.names():
            self.report.candidates += 1
            # re-read: candidates are judged against the current manifest
            entry = lookup(module_dir, group, name)
            if entry is None:
                print(f"  ⚠ {name} no longer declared in {group.value} dependencies - skipping")
                self.report.skipped += 1
                continue
            reason = self.policy.skip_reason(entry, declared.ignored)
            if reason is not None:
                print(f"  - {entry.name}: {reason}")
                self.report.skipped += 1
                continue
            if self.oracle.is_used(module_dir, entry.name):
                print(f"  looks like {entry.name} is used - skipping")
                self.report.used += 1
                continue
            self.try_candidate(module_dir, entry)

    def try_candidate(self, module_dir: Path, entry: DependencyEntry) -> VerificationOutcome:
        """Remove, verify, then always reset the module tree."""
        try:
            outcome = self.applier.remove(module_dir, entry.name, entry.group)
            if outcome is None:
                outcome = self.pipeline.verify(module_dir)
        finally:
            self.repo.reset(module_dir)

        if outcome.ok:
            self.ledger.record(module_dir, entry.name, entry.group)
            self.report.removed += 1
            print(f"  ✓ WORKED: {entry.name} ({entry.group.value}) can be removed")
        else:
            self.report.failures[outcome.kind] += 1
            print(f"  ✗ {entry.name} ({entry.group.value}): {outcome.kind.value}")
        return outcome
