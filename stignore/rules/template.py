#!/usr/bin/env python3
"""Starter rule files rendered with Jinja2.

This module generates the content written by ``stignore init``:
- Grouped default exclusions (version control, build output, editors, OS)
- A minimal variant
- Caller-supplied extra patterns

Example:
    >>> content = render_rule_file(minimal=True, extra_patterns=["*.bak"])
    >>> "*.bak" in content
    True
"""

import os
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import jinja2

from stignore.core.constants import ErrorCode, Limits, STIGNORE_VERSION
from stignore.rules.errors import IgnoreError

RULE_FILE_TEMPLATE = """\
// {{ filename }} - generated by stignore {{ version }} on {{ generated }}
//
// One pattern per line. Lines starting with // are comments.
// The FIRST matching line decides: put !exceptions above the rules
// they carve out of.
//
//   /build      only at the root
//   **/build    at any depth (plain names match at any depth too)
//   logs/       a directory and everything below it
//   !keep.log   never ignore keep.log
//   #include other-rules   splice another file here
{% for section, patterns in sections.items() %}
// {{ section }}
{% for pattern in patterns -%}
{{ pattern }}
{% endfor -%}
{% endfor %}
"""

MINIMAL_SECTIONS: Dict[str, List[str]] = {
    "Version control": [".git/"],
    "Build output": ["build/", "dist/"],
    "OS files": [".DS_Store", "Thumbs.db"],
}

DEFAULT_SECTIONS: Dict[str, List[str]] = {
    "Version control": [".git/", ".hg/", ".svn/"],
    "Python": ["__pycache__/", "*.py[cod]", ".venv/", "*.egg-info/"],
    "Node.js": ["node_modules/"],
    "Build output": ["build/", "dist/", "out/", "*.o", "*.so"],
    "Editors": [".idea/", ".vscode/", "*.swp", "*~"],
    "OS files": [".DS_Store", "Thumbs.db", "desktop.ini"],
    "Temporary files": ["*.tmp", "*.bak"],
}


def render_rule_file(
    minimal: bool = False,
    extra_patterns: Optional[Sequence[str]] = None,
    filename: str = Limits.DEFAULT_RULE_FILE,
) -> str:
    """Render starter rule-file content.

    Args:
        minimal: Use the short default list
        extra_patterns: Additional patterns, emitted in their own section
        filename: Name shown in the header

    Returns:
        Rule-file text
    """
    sections = dict(MINIMAL_SECTIONS if minimal else DEFAULT_SECTIONS)
    if extra_patterns:
        sections["Project specific"] = list(extra_patterns)

    env = jinja2.Environment(
        autoescape=False,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )
    template = env.from_string(RULE_FILE_TEMPLATE)
    return template.render(
        filename=os.path.basename(filename),
        version=STIGNORE_VERSION,
        generated=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        sections=sections,
    )


def write_rule_file(path: str, content: str, force: bool = False) -> None:
    """Write rule-file content to disk.

    Args:
        path: Destination path
        content: Text to write
        force: Overwrite an existing file

    Raises:
        IgnoreError: If the file exists and force is not set, or on I/O errors
    """
    if os.path.exists(path) and not force:
        raise IgnoreError(f"Rule file already exists: {path} (use --force)", ErrorCode.CONFLICT)

    try:
        with open(path, "w", encoding=Limits.RULE_FILE_ENCODING) as f:
            f.write(content)
    except OSError as e:
        raise IgnoreError(f"Cannot write rule file {path}: {e}", ErrorCode.PERMISSION_DENIED) from e
