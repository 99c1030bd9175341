import os
from dataclasses import dataclass
from pathlib import Path

import pytest

PDFINFO = """#!/bin/sh
echo "pdfinfo $*" >> "$FAKE_LOG"
if [ ! -f "$1" ]; then
  echo "I/O Error: Couldn't open file '$1'" >&2
  exit 1
fi
printf 'Title:          test\\nProducer:       fake\\nPages:          %s\\nPage size:      612 x 792 pts\\n' "${FAKE_PAGES-10}"
"""

# Shared by `convert` and `gm`: the last argument is the output file, the
# one before it is either "<pdf>[<page>]" or the last image to append.
CONVERT = """#!/bin/sh
echo "$(basename "$0") $*" >> "$FAKE_LOG"
prev=""
last=""
for arg; do prev="$last"; last="$arg"; done
if [ -n "$FAKE_FAIL_PAGE" ]; then
  case "$prev" in
    *"[$FAKE_FAIL_PAGE]") echo "convert: page $FAKE_FAIL_PAGE failed" >&2; exit 1;;
  esac
fi
case "$prev" in
  *\\])
    src="${prev%\\[*}"
    if [ ! -f "$src" ]; then
      echo "convert: unable to open image '$src'" >&2
      exit 1
    fi
    ;;
esac
if [ -n "$FAKE_SLEEP" ]; then sleep "$FAKE_SLEEP"; fi
printf 'img' > "$last"
"""


@dataclass
class FakeTools:
    bin_dir: Path
    log: Path

    def calls(self, tool: str | None = None) -> list[str]:
        if not self.log.exists():
            return []
        lines = self.log.read_text(encoding="utf-8").splitlines()
        if tool is None:
            return lines
        return [line for line in lines if line.split(" ", 1)[0] == tool]


@pytest.fixture
def fake_tools(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    for name, body in (("pdfinfo", PDFINFO), ("convert", CONVERT), ("gm", CONVERT)):
        script = bin_dir / name
        script.write_text(body, encoding="utf-8")
        script.chmod(0o755)

    log = tmp_path / "calls.log"
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("FAKE_LOG", str(log))
    for var in ("FAKE_PAGES", "FAKE_FAIL_PAGE", "FAKE_SLEEP"):
        monkeypatch.delenv(var, raising=False)
    return FakeTools(bin_dir=bin_dir, log=log)


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    docs = tmp_path / "docs"
    docs.mkdir()
    p = docs / "test.pdf"
    p.write_bytes(b"%PDF-1.4\n% fake\n")
    return p
