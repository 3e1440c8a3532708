from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--once", "--size", "80x24"]


@dataclass
class Example:
    name: str
    args: list[str]
    output: Path
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return [sys.executable, "explore.py", *BASE_ARGS, *self.args]


def _example(name: str, args: list[str], filename: str) -> Example:
    return Example(
        name=name,
        args=args,
        output=EXAMPLES_ROOT / name / filename,
        clean=[EXAMPLES_ROOT / name],
    )


EXAMPLES: list[Example] = [
    _example("default", [], "initial-view.txt"),
    _example("max-iterations", ["--max-iterations", "200"], "low-iterations.txt"),
    _example("escape-threshold", ["--escape-threshold", "4"], "radius-two.txt"),
    _example("x-min", ["--x-min", "-2.5"], "shifted-right.txt"),
    _example("width", ["--x-min", "-1.0", "--width", "0.5"], "narrow-window.txt"),
    _example("y-min", ["--y-min", "-1.0", "--height", "1.0"], "upper-half.txt"),
    _example(
        "seahorse-valley",
        ["--x-min", "-0.78", "--width", "0.06", "--y-min", "0.08", "--height", "0.06"],
        "seahorse-valley.txt",
    ),
    _example("engine", ["--engine", "python"], "scalar-engine.txt"),
    _example("size", ["--size", "40x12"], "small-grid.txt"),
    _example("verbose", ["--verbose"], "diagnostic.txt"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    _ensure_clean(example.clean or [])
    example.output.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    if not example.output.is_file():
        raise RuntimeError(f"Expected file {example.output} was not created")
    if not example.output.read_text().strip("\n"):
        raise RuntimeError(f"Frame {example.output} is empty")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        with example.output.open("w") as out:
            completed = subprocess.run(example.full_args(), stdout=out, check=True)
        if completed.returncode != 0:
            raise RuntimeError(f"Example {example.name} failed with {completed.returncode}")
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
