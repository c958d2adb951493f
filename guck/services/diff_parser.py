"""Parse unified diff text from git into per-file FileChange records."""

import codecs
import logging
import re
from typing import Dict, List, Optional, Tuple

from ..models import FileChange, FileStatus

logger = logging.getLogger(__name__)

DIFF_HEADER = "diff --git "

# Only boundaries at the start of a line; content lines always carry a prefix.
_BOUNDARY_RE = re.compile(r"^diff --git ", re.MULTILINE)

# Git's own heuristic looks for NUL bytes in the first 8000 bytes.
_BINARY_SNIFF_BYTES = 8000


def count_changes(patch: str) -> Tuple[int, int]:
    """Count added and removed content lines of a single-file patch.

    ``+++``/``---`` lines are file headers only before the first ``@@`` hunk
    header. Inside hunks every line is classified by its first character.
    """
    additions = 0
    deletions = 0
    in_hunk = False
    for line in patch.split("\n"):
        if line.startswith("@@"):
            in_hunk = True
            continue
        if line.startswith(DIFF_HEADER):
            in_hunk = False
            continue
        if not in_hunk and (line.startswith("+++") or line.startswith("---")):
            continue
        if line.startswith("+"):
            additions += 1
        elif line.startswith("-"):
            deletions += 1
    return additions, deletions


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of paths with special characters."""
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        raw = codecs.escape_decode(path[1:-1].encode("utf-8"))[0]
        return raw.decode("utf-8", errors="replace")
    return path


def _strip_prefix(path: str, prefix: str) -> str:
    path = unquote_path(path.rstrip("\t"))
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def _path_from_header_line(header: str) -> Optional[str]:
    """Recover the post-image path from ``a/<path> b/<path>``."""
    header = header.rstrip("\r")
    if header.startswith('"') or header.endswith('"'):
        match = re.match(r'^("(?:[^"\\]|\\.)*"|\S+) ("(?:[^"\\]|\\.)*"|.+)$', header)
        if match:
            return _strip_prefix(match.group(2), "b/")
        return None

    # Without a rename both halves are identical, so split in the middle.
    if len(header) % 2 == 1:
        middle = len(header) // 2
        left, right = header[:middle], header[middle + 1:]
        if header[middle] == " " and left[2:] == right[2:]:
            return _strip_prefix(right, "b/")

    if " b/" in header:
        return header.rsplit(" b/", 1)[1]
    parts = header.split(" ")
    if len(parts) < 2:
        return None
    return _strip_prefix(parts[1], "b/")


def _post_image_path(lines: List[str]) -> Optional[str]:
    old_path = None
    renamed_to = None
    for line in lines[1:]:
        if line.startswith("@@"):
            break
        if line.startswith("+++ "):
            target = line[4:].rstrip("\r")
            if target != "/dev/null":
                return _strip_prefix(target, "b/")
        elif line.startswith("--- "):
            source = line[4:].rstrip("\r")
            if source != "/dev/null":
                old_path = _strip_prefix(source, "a/")
        elif line.startswith("rename to "):
            renamed_to = unquote_path(line[len("rename to "):].rstrip("\r"))

    if renamed_to:
        return renamed_to
    if old_path:
        return old_path
    return _path_from_header_line(lines[0])


def _classify(lines: List[str]) -> FileStatus:
    # Only extended header lines count; hunk content may contain the markers.
    for line in lines[1:]:
        if line.startswith(("@@", "--- ", "+++ ", "Binary files ")):
            break
        if line.startswith("new file mode"):
            return FileStatus.ADDED
        if line.startswith("deleted file mode"):
            return FileStatus.DELETED
        if line.startswith("rename from"):
            return FileStatus.RENAMED
    return FileStatus.MODIFIED


def split_patches(diff_output: str) -> List[str]:
    """Split a multi-file diff into per-file patches, dropping any preamble."""
    starts = [match.start() for match in _BOUNDARY_RE.finditer(diff_output)]
    bounds = starts[1:] + [len(diff_output)]
    return [diff_output[start:end] for start, end in zip(starts, bounds)]


def parse_diff_output(diff_output: str) -> List[FileChange]:
    """Parse ``git diff`` output into FileChange records, in input order."""
    files: List[FileChange] = []
    if not diff_output:
        return files

    positions: Dict[str, int] = {}
    for patch in split_patches(diff_output):
        segment = patch[len(DIFF_HEADER):]
        lines = segment.split("\n")
        path = _post_image_path(lines)
        if not path:
            logger.debug("Skipping diff segment without a path: %r", lines[0])
            continue

        additions, deletions = count_changes(patch)
        change = FileChange(
            path=path,
            status=_classify(lines),
            additions=additions,
            deletions=deletions,
            patch=patch,
        )

        if path in positions:
            # A type change (file to symlink and back) arrives as a deletion
            # plus an addition of the same path.
            files[positions[path]] = _merge(files[positions[path]], change)
            continue
        positions[path] = len(files)
        files.append(change)

    return files


def _merge(first: FileChange, second: FileChange) -> FileChange:
    return FileChange(
        path=first.path,
        status=FileStatus.MODIFIED,
        additions=first.additions + second.additions,
        deletions=first.deletions + second.deletions,
        patch=first.patch + second.patch,
    )


def is_binary(data: bytes) -> bool:
    if b"\x00" in data[:_BINARY_SNIFF_BYTES]:
        return True
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return False


def build_untracked_patch(path: str, data: bytes) -> FileChange:
    """Present an untracked file as a diff that adds its whole content."""
    header = (
        f"diff --git a/{path} b/{path}\n"
        "new file mode 100644\n"
    )

    if is_binary(data):
        return FileChange(
            path=path,
            status=FileStatus.UNTRACKED,
            patch=header + f"Binary files /dev/null and b/{path} differ\n",
        )

    text = data.decode("utf-8")
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    patch = header + f"--- /dev/null\n+++ b/{path}\n"
    if lines:
        patch += f"@@ -0,0 +1,{len(lines)} @@\n"
        patch += "".join(f"+{line}\n" for line in lines)
        if not text.endswith("\n"):
            patch += "\\ No newline at end of file\n"

    return FileChange(
        path=path,
        status=FileStatus.UNTRACKED,
        additions=len(lines),
        deletions=0,
        patch=patch,
    )
