"""Static asset loading (store logo)."""

import asyncio
import io
import logging
from pathlib import Path
from typing import Optional, Union

from reportlab.lib.utils import ImageReader


logger = logging.getLogger(__name__)


def load_logo(source: Union[Path, str, None]) -> Optional[bytes]:
    """
    Read and validate a logo image.

    Any failure (missing file, unreadable or undecodable image) is logged and
    yields None so documents are generated without a logo.
    """
    if source is None:
        return None

    path = Path(source)
    try:
        data = path.read_bytes()
        # Decode once so a corrupt file is caught here rather than mid-render
        ImageReader(io.BytesIO(data)).getSize()
    except Exception as exc:
        logger.warning("Could not load logo %s: %s", path, exc)
        return None
    return data


async def load_logo_async(source: Union[Path, str, None]) -> Optional[bytes]:
    """Non-blocking variant of :func:`load_logo` for the async report entry points."""
    if source is None:
        return None
    return await asyncio.to_thread(load_logo, source)
