import json
import sys
from pathlib import Path

import pytest

# Ensure repo_root/src is available on sys.path before any tests import project modules
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from depsweep.runner import CommandResult  # noqa: E402


def res(argv, code=0, out=""):
    return CommandResult(tuple(argv), code, out, out)


class FakeRunner:
    """Records every call; answers through ``handler(argv, cwd)``."""

    def __init__(self, handler=None, missing=()):
        self.calls = []
        self.handler = handler
        self.missing = set(missing)

    def which(self, executable):
        return None if executable in self.missing else f"/usr/bin/{executable}"

    def call(self, args, cwd=None):
        argv = tuple(str(a) for a in args)
        self.calls.append((argv, Path(cwd) if cwd else None))
        if self.handler is not None:
            r = self.handler(argv, Path(cwd) if cwd else None)
            if r is not None:
                return r
        return res(argv)

    def commands(self, *prefix):
        return [argv for argv, _ in self.calls if argv[: len(prefix)] == prefix]


class FakeWorkspace:
    """A tmp_path Cargo workspace whose external tools are simulated.

    ``cargo rm`` really edits the member's Cargo.toml and ``git reset --hard``
    restores every manifest to the bytes written at construction time.

    Knobs:
      used       dependency names rg reports as referenced
      fail       {(member, removed_dep): "rm" | "check" | "build" | "doc"}
      probe_ok   whether the root --all-features check passes
      no_lib     members whose doc stage reports no library target
      dirty      whether git status reports pending changes
    """

    def __init__(self, root: Path, members: dict):
        self.root = root
        self.members = {}
        self.committed = {}
        for name, manifest in members.items():
            d = root / name
            (d / "src").mkdir(parents=True)
            (d / "src" / "lib.rs").write_text("pub fn f() {}\n", encoding="utf-8")
            (d / "Cargo.toml").write_text(manifest, encoding="utf-8")
            self.members[name] = d.resolve()
            self.committed[d / "Cargo.toml"] = (d / "Cargo.toml").read_bytes()
        self.used = set()
        self.fail = {}
        self.probe_ok = True
        self.no_lib = set()
        self.dirty = False
        self.removed = {}
        self.runner = FakeRunner(self.handle)

    def metadata(self) -> str:
        return json.dumps(
            {
                "workspace_root": str(self.root),
                "workspace_members": [f"{n} 0.1.0 (path+file://{d})" for n, d in self.members.items()],
                "packages": [
                    {
                        "id": f"{n} 0.1.0 (path+file://{d})",
                        "name": n,
                        "manifest_path": str(d / "Cargo.toml"),
                    }
                    for n, d in self.members.items()
                ],
            }
        )

    def handle(self, argv, cwd):
        cwd = (cwd or self.root).resolve()
        tool, sub = argv[0], argv[1]
        if tool == "git":
            if sub == "status":
                return res(argv, 0, " M foo/Cargo.toml\n" if self.dirty else "")
            if sub == "reset":
                for path, data in self.committed.items():
                    path.write_bytes(data)
                self.removed.clear()
                return res(argv)
        if tool == "rg":
            pattern = argv[argv.index("-e") + 1]
            ident = pattern[len(r"\b"):-len("::")]
            used = {u.replace("-", "_") for u in self.used}
            return res(argv, 0 if ident in used else 1)
        if tool == "cargo":
            if sub == "metadata":
                return res(argv, 0, self.metadata())
            if sub == "rm":
                if argv[2:] == ("--help",):
                    return res(argv)
                return self._cargo_rm(argv, cwd)
            if cwd == self.root.resolve():
                return res(argv, 0 if self.probe_ok else 101, "")
            if sub == "test" and cwd.name in self.no_lib:
                return res(argv, 101, f"error: no library targets found in package `{cwd.name}`")
            stage = {"check": "check", "build": "build", "test": "doc"}[sub]
            removed = self.removed.get(cwd)
            if removed and self.fail.get((cwd.name, removed)) == stage:
                return res(argv, 101, f"error[E0433]: failed to resolve: {removed}")
            return res(argv)
        return None

    def _cargo_rm(self, argv, cwd):
        name = argv[-1]
        manifest = cwd / "Cargo.toml"
        lines = manifest.read_text(encoding="utf-8").splitlines(keepends=True)
        kept = [l for l in lines if not l.replace(" ", "").startswith(name + "=")]
        manifest.write_text("".join(kept), encoding="utf-8")
        self.removed[cwd] = name
        if self.fail.get((cwd.name, name)) == "rm":
            return res(argv, 1, "error: the dependency could not be found")
        return res(argv)

    def manifest_bytes(self, member: str) -> bytes:
        return (self.members[member] / "Cargo.toml").read_bytes()


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def write_manifest(tmp_path):
    def _write(text: str, rel: str = "crate") -> Path:
        d = tmp_path / rel
        d.mkdir(parents=True, exist_ok=True)
        (d / "Cargo.toml").write_text(text, encoding="utf-8")
        return d

    return _write
