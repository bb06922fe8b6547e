"""
Asset readers: byte-level access to level resources.

A reader answers two questions for a relative asset path such as
"levels/world1_stage1.json": does it exist, and what are its bytes.
Paths always use forward slashes, whatever the backing store.

Readers keep no open handles between calls, so one reader can be shared by
concurrent loads.
"""

import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Dict, List, Protocol, Union

from tilelevel.errors import AssetAccessError


class AssetReader(Protocol):
    """Interface the loader uses to reach level files."""

    def exists(self, path: str) -> bool:
        ...

    def read(self, path: str) -> bytes:
        ...


def _normalize(path: str) -> str:
    """Reject absolute paths and parent references; return a clean posix path."""
    pure = PurePosixPath(path)
    if pure.is_absolute() or ".." in pure.parts:
        raise AssetAccessError(f"Asset path escapes asset root: {path}", path=path)
    return pure.as_posix()


class DirectoryAssetReader:
    """
    Reads assets from a directory on disk.

    Example:
        >>> reader = DirectoryAssetReader("app/src/main/assets")
        >>> reader.exists("levels/world1_stage1.json")
        True
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / _normalize(path)

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except AssetAccessError:
            return False

    def read(self, path: str) -> bytes:
        full_path = self._resolve(path)
        try:
            with open(full_path, "rb") as f:
                data = f.read()
            expected = full_path.stat().st_size
        except OSError as e:
            raise AssetAccessError(f"Failed to read asset: {e}", path=path) from e
        if len(data) < expected:
            raise AssetAccessError(
                f"Failed to read entire asset: got {len(data)} of {expected} bytes", path=path
            )
        return data

    def list_assets(self, directory: str = "") -> List[str]:
        """Asset paths (relative to root) under `directory`."""
        base = self._resolve(directory) if directory else self.root
        if not base.is_dir():
            return []
        return sorted(p.relative_to(self.root).as_posix() for p in base.rglob("*") if p.is_file())

    def __repr__(self) -> str:
        return f"DirectoryAssetReader({str(self.root)!r})"


class ZipAssetReader:
    """
    Reads assets from a ZIP archive (e.g. a packed assets bundle or APK).

    The archive is opened per call; entries are addressed by their archive
    path, optionally below a `prefix` such as "assets/".
    """

    def __init__(self, archive_path: Union[str, Path], prefix: str = ""):
        self.archive_path = Path(archive_path)
        self.prefix = prefix.strip("/")

    def _entry(self, path: str) -> str:
        path = _normalize(path)
        return f"{self.prefix}/{path}" if self.prefix else path

    def _open(self) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(self.archive_path, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise AssetAccessError(f"Cannot open archive: {e}", path=str(self.archive_path)) from e

    def exists(self, path: str) -> bool:
        try:
            entry = self._entry(path)
        except AssetAccessError:
            return False
        with self._open() as zf:
            return entry in zf.namelist()

    def read(self, path: str) -> bytes:
        entry = self._entry(path)
        with self._open() as zf:
            try:
                info = zf.getinfo(entry)
                data = zf.read(info)
            except KeyError as e:
                raise AssetAccessError("Asset not found", path=path) from e
            except (OSError, zipfile.BadZipFile, zlib.error) as e:
                raise AssetAccessError(f"Failed to read asset: {e}", path=path) from e
        if len(data) < info.file_size:
            raise AssetAccessError(
                f"Failed to read entire asset: got {len(data)} of {info.file_size} bytes", path=path
            )
        return data

    def list_assets(self, directory: str = "") -> List[str]:
        """Asset paths (relative to prefix) under `directory`."""
        base = self._entry(directory) if directory else self.prefix
        with self._open() as zf:
            names = zf.namelist()
        strip = len(self.prefix) + 1 if self.prefix else 0
        return sorted(
            n[strip:] for n in names
            if not n.endswith("/") and (not base or n.startswith(base.rstrip("/") + "/"))
        )

    def __repr__(self) -> str:
        return f"ZipAssetReader({str(self.archive_path)!r}, prefix={self.prefix!r})"


class MemoryAssetReader:
    """Serves assets from a dict of path -> bytes (or str, encoded as UTF-8)."""

    def __init__(self, files: Dict[str, Union[bytes, str]]):
        self._files = {
            _normalize(path): data.encode("utf-8") if isinstance(data, str) else bytes(data)
            for path, data in files.items()
        }

    def exists(self, path: str) -> bool:
        try:
            return _normalize(path) in self._files
        except AssetAccessError:
            return False

    def read(self, path: str) -> bytes:
        try:
            return self._files[_normalize(path)]
        except KeyError as e:
            raise AssetAccessError("Asset not found", path=path) from e

    def list_assets(self, directory: str = "") -> List[str]:
        base = _normalize(directory).rstrip("/") + "/" if directory else ""
        return sorted(p for p in self._files if p.startswith(base))


def open_asset_root(root: Union[str, Path]) -> AssetReader:
    """Reader for a directory, or for a .zip archive when `root` is a file."""
    root = Path(root)
    if root.is_file() and zipfile.is_zipfile(root):
        return ZipAssetReader(root)
    return DirectoryAssetReader(root)
