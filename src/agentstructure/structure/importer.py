"""Dynamic module import for target files.

Files are imported as Python source whatever their extension, each time as
a brand-new module object compiled straight from the file on disk.  Bytecode
caches are neither read nor written, so re-importing a file after it changed
always runs the new code and the host's target tree is never written to.
"""
from __future__ import annotations

import ast
import hashlib
import importlib.machinery
import importlib.util
import inspect
import logging
import re
import sys
from pathlib import Path
from types import CodeType, ModuleType

logger = logging.getLogger(__name__)

_MODULE_PREFIX = "agentstructure_targets"


class _UncachedSourceLoader(importlib.machinery.SourceFileLoader):
    """Source loader that compiles from source on every call.

    ``SourceFileLoader`` validates ``__pycache__`` entries by size and
    whole-second mtime only, so an edit of equal length within the same
    second would otherwise load stale bytecode.
    """

    def get_code(self, fullname: str) -> CodeType:
        source_path = self.get_filename(fullname)
        return self.source_to_code(self.get_data(source_path), source_path)


def module_name_for(agent_name: str, path: Path) -> str:
    """Return a stable, import-safe module name for *path* within an agent."""
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:10]
    agent_part = re.sub(r"\W", "_", agent_name)
    stem = re.sub(r"\W", "_", path.stem) or "module"
    return f"{_MODULE_PREFIX}.{agent_part}.{stem}_{digest}"


def import_file(path: Path, module_name: str) -> ModuleType:
    """Execute the source file at *path* as a fresh module called *module_name*.

    The module is published in ``sys.modules`` while it runs (dataclasses
    and pickling look it up there) and removed again if execution fails.

    Raises
    ------
    ImportError
        If no module spec can be created for *path*.
    Exception
        Whatever the module body raises while executing.
    """
    loader = _UncachedSourceLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    if spec is None:
        raise ImportError(f"Could not create module spec for {path}.", path=str(path))

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    logger.debug("Imported %s as %s", path, module_name)
    return module


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------


def _top_level_statements(body: list[ast.stmt]) -> list[ast.stmt]:
    """Flatten module-level statements, entering ``if``/``try``/``with`` blocks."""
    statements: list[ast.stmt] = []
    for node in body:
        statements.append(node)
        if isinstance(node, ast.If):
            statements.extend(_top_level_statements(node.body + node.orelse))
        elif isinstance(node, (ast.Try, ast.TryStar)):
            blocks = node.body + node.orelse + node.finalbody
            for handler in node.handlers:
                blocks = blocks + handler.body
            statements.extend(_top_level_statements(blocks))
        elif isinstance(node, (ast.With, ast.AsyncWith)):
            statements.extend(_top_level_statements(node.body))
    return statements


def imported_names(module: ModuleType) -> frozenset[str]:
    """Return the module-level names *module* last bound with an import statement.

    A name rebound later by a ``def``, ``class`` or plain assignment counts as
    defined by the module.  Star imports bind nothing nameable and are
    ignored.  A module without readable source imports nothing.
    """
    source_path = getattr(module, "__file__", None)
    if source_path is None:
        return frozenset()
    try:
        tree = ast.parse(Path(source_path).read_bytes(), filename=source_path)
    except (OSError, SyntaxError, ValueError):
        return frozenset()

    imported: set[str] = set()
    for node in _top_level_statements(tree.body):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imported.add(alias.asname or alias.name.split(".", 1)[0])
        elif isinstance(node, ast.ImportFrom):
            for alias in node.names:
                if alias.name != "*":
                    imported.add(alias.asname or alias.name)
        elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            imported.discard(node.name)
        elif isinstance(node, (ast.Assign, ast.AnnAssign, ast.AugAssign)):
            targets = node.targets if isinstance(node, ast.Assign) else [node.target]
            for target in targets:
                for name_node in ast.walk(target):
                    if isinstance(name_node, ast.Name):
                        imported.discard(name_node.id)
    return frozenset(imported)


def exported_values(module: ModuleType) -> list[tuple[str, object]]:
    """Return the ``(name, value)`` pairs *module* exports, distinct by identity.

    ``__all__`` wins when present.  Otherwise every public attribute counts
    except submodules, names bound by the module's own import statements,
    and objects defined in another module (which covers star imports).
    """
    declared = getattr(module, "__all__", None)
    if declared is not None:
        candidates = [(name, getattr(module, name)) for name in declared]
    else:
        skipped = imported_names(module)
        candidates = []
        for name, value in vars(module).items():
            if name.startswith("_") or name in skipped or inspect.ismodule(value):
                continue
            owner = getattr(value, "__module__", None)
            if owner is not None and owner != module.__name__:
                continue
            candidates.append((name, value))

    seen: set[int] = set()
    exports: list[tuple[str, object]] = []
    for name, value in candidates:
        if id(value) in seen:
            continue
        seen.add(id(value))
        exports.append((name, value))
    return exports
