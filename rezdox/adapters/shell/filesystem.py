"""
Filesystem adapter — file and directory operations.

Provides a receipt-returning interface for the file steps of a
build: create the output directory, copy the Doxyfile template,
append overrides, and copy the generated tree on install.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from rezdox.adapters.base import Adapter, ExecutionContext
from rezdox.core.models.action import Receipt

logger = logging.getLogger(__name__)

VALID_OPERATIONS = {"mkdir", "copy", "append", "copytree"}


class FilesystemAdapter(Adapter):
    """File and directory operations with receipts.

    Action params:
        operation (str): One of 'mkdir', 'copy', 'append', 'copytree'.
        path (str): Target path (relative to working_dir or absolute).
        source (str): Source path (for 'copy' and 'copytree').
        content (str): Text to append (for 'append').
    """

    @property
    def name(self) -> str:
        return "filesystem"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        operation = params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        if operation not in VALID_OPERATIONS:
            return False, (
                f"Unknown operation '{operation}'. "
                f"Valid: {', '.join(sorted(VALID_OPERATIONS))}"
            )

        if not params.get("path", ""):
            return False, "Missing required param: 'path'"

        if operation in ("copy", "copytree") and not params.get("source"):
            return False, f"Missing required param: 'source' for {operation} operation"

        if operation == "append" and "content" not in params:
            return False, "Missing required param: 'content' for append operation"

        # Templates exist before the build starts; generated trees do not.
        if operation == "copy" and not self._resolve(context, params["source"]).is_file():
            return False, f"Source file not found: {params['source']}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.action.params["operation"]
        target = self._resolve(context, context.action.params["path"])

        try:
            if operation == "mkdir":
                return self._mkdir(context, target)
            elif operation == "copy":
                return self._copy(context, target)
            elif operation == "append":
                return self._append(context, target)
            elif operation == "copytree":
                return self._copytree(context, target)
            else:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=f"Unknown operation: {operation}",
                )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation, "path": str(target)},
            )

    @staticmethod
    def _resolve(ctx: ExecutionContext, raw_path: str) -> Path:
        path = Path(raw_path)
        if not path.is_absolute():
            path = Path(ctx.working_dir) / path
        return path

    def _mkdir(self, ctx: ExecutionContext, target: Path) -> Receipt:
        target.mkdir(parents=True, exist_ok=True)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Directory created: {target}",
            metadata={"path": str(target)},
        )

    def _copy(self, ctx: ExecutionContext, target: Path) -> Receipt:
        source = self._resolve(ctx, ctx.action.params["source"])
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Copied {source} to {target}",
            metadata={"source": str(source), "path": str(target)},
        )

    def _append(self, ctx: ExecutionContext, target: Path) -> Receipt:
        # Bytes only: the existing text may be in any encoding.
        data = ctx.action.params["content"].encode("utf-8")
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("ab+") as fh:
            if fh.tell() > 0:
                fh.seek(-1, os.SEEK_END)
                if fh.read(1) != b"\n":
                    data = b"\n" + data
            fh.write(data)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Appended {len(data)} bytes to {target}",
            metadata={"path": str(target), "size": len(data)},
        )

    def _copytree(self, ctx: ExecutionContext, target: Path) -> Receipt:
        source = self._resolve(ctx, ctx.action.params["source"])
        if not source.is_dir():
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Not a directory: {source}",
            )
        shutil.copytree(source, target, dirs_exist_ok=True)
        count = sum(1 for p in target.rglob("*") if p.is_file())
        logger.debug("Copied %d file(s) from %s to %s", count, source, target)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Installed {source} to {target}",
            metadata={"source": str(source), "path": str(target), "count": count},
        )
