import asyncio
import logging


def _read(path: str, encoding: str) -> str:
    with open(path, "r", encoding=encoding) as f:
        return f.read()


async def read_file(path: str, encoding: str = "utf-8") -> str:
    """Reads a local file without blocking the event loop."""
    logging.debug(f"Reading local asset {path}")
    return await asyncio.to_thread(_read, path, encoding)
