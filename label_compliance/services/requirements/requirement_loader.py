"""
Requirement file loading.

Reads an uploaded requirement file (CSV, Excel workbook or JSON) into the raw
source shape the RequirementBuilder accepts: a list of row dicts for
spreadsheets, or whatever the JSON document holds.
"""
import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from fastapi import UploadFile

from label_compliance.core.config import settings
from label_compliance.core.constants import SUPPORTED_REQUIREMENT_EXTENSIONS
from label_compliance.core.error_handling import RequirementSourceError

logger = logging.getLogger(__name__)


def dataframe_to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Row dicts with string headers; empty cells become None."""
    df = df.dropna(how="all")
    df.columns = [str(column).strip() for column in df.columns]
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


class RequirementFileLoader:
    """Handles requirement file input."""

    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes if max_bytes is not None else settings.max_upload_bytes

    def check_filename(self, filename: Optional[str]) -> str:
        """Lowercase extension of a supported file.

        Raises:
            RequirementSourceError: If the extension is not supported
        """
        suffix = Path(filename or "").suffix.lower()
        if suffix not in SUPPORTED_REQUIREMENT_EXTENSIONS:
            raise RequirementSourceError(
                f"Unsupported requirement file type '{suffix or filename}'. "
                f"Supported: {', '.join(SUPPORTED_REQUIREMENT_EXTENSIONS)}"
            )
        return suffix

    def _enforce_size_limit(self, size: int) -> None:
        if size > self.max_bytes:
            raise RequirementSourceError(
                f"Requirement file too large ({size} bytes). Maximum is {self.max_bytes} bytes."
            )

    def parse(self, content: bytes, filename: str) -> Any:
        """
        Parse file content into a raw requirement source.

        Unreadable content yields an empty list, which builds an empty
        requirement set.

        Raises:
            RequirementSourceError: If the file type is unsupported or too large
        """
        suffix = self.check_filename(filename)
        self._enforce_size_limit(len(content))

        try:
            if suffix == ".csv":
                df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
                return dataframe_to_rows(df)
            if suffix == ".xlsx":
                df = pd.read_excel(io.BytesIO(content), sheet_name=0, engine="openpyxl")
                return dataframe_to_rows(df)
            return json.loads(content.decode("utf-8-sig"))
        except Exception as e:
            logger.warning(f"Could not parse requirement file {filename}: {e}")
            return []

    async def load_upload(self, file: UploadFile) -> Any:
        """Read and parse an uploaded requirement file."""
        self.check_filename(file.filename)
        content = await file.read()
        logger.info(f"Received requirement file: {file.filename} ({len(content)} bytes)")
        return self.parse(content, file.filename)
