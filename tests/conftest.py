"""Shared test fixtures for repofit."""

from __future__ import annotations

import pytest

from repofit.log import NullLogger


def tag_file(path: str, text: str) -> str:
    return f'<file path="{path}">\n{text}\n</file>'


def header_file(path: str, text: str, rule: str = "=") -> str:
    return f"File: {path}\n{rule * 16}\n{text}\n"


INTRO = """This file is a merged representation of the entire codebase.

Directory Structure
===================
package.json
README.md
src/config.ts
src/server.ts
src/utils/format.ts

"""


@pytest.fixture
def null_logger() -> NullLogger:
    return NullLogger()


@pytest.fixture
def tagged_dump() -> str:
    """A tag-framed dump with an introduction and four files."""
    files = [
        tag_file(
            "src/config.ts",
            "export function parseConfig(raw: string) {\n"
            "  // parseConfig validates and normalizes settings\n"
            "  return JSON.parse(raw);\n"
            "}\n" + "const pad = 0;\n" * 40,
        ),
        tag_file(
            "src/server.ts",
            "import { parseConfig } from './config';\n"
            "const app = createApp();\n" + "app.use(handler);\n" * 60,
        ),
        tag_file(
            "src/utils/format.ts",
            "export const formatDate = (d: Date) => d.toISOString();\n" * 80,
        ),
        tag_file("README.md", "# Demo\n\nA small demo service.\n" * 10),
    ]
    return INTRO + "\n".join(files) + "\n"


@pytest.fixture
def header_dump() -> str:
    """A header-framed dump with an introduction and four files."""
    files = [
        header_file("package.json", '{\n  "name": "demo",\n  "main": "src/server.ts"\n}'),
        header_file(
            "src/config.ts",
            "export function parseConfig(raw) {\n  return JSON.parse(raw);\n}\n"
            + "const pad = 0;\n" * 40,
            rule="-",
        ),
        header_file("src/server.ts", "const app = createApp();\n" + "app.use(handler);\n" * 60),
        header_file("tests/server.test.ts", "it('boots', () => {});\n" * 50),
    ]
    return INTRO + "".join(files)


@pytest.fixture
def plain_text() -> str:
    """Unstructured notes with no recognizable file framing."""
    lines = []
    for i in range(120):
        if i == 40:
            lines.append("The scheduler retries failed jobs with exponential backoff.")
        elif i == 90:
            lines.append("Scheduler shutdown drains the queue before exiting.")
        else:
            lines.append(f"Line {i}: ordinary narrative text about the project history.")
    return "\n".join(lines)
