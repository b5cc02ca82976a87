from pathlib import Path

from .debug import log


class Rom:
    """raw program bytes plus a name to show in the window caption"""
    def __init__(self, data: bytes, name: str = "rom"):
        self.data = bytes(data)
        self.name = name

    def __len__(self):
        return len(self.data)

    def __bytes__(self):
        return self.data

    def __repr__(self):
        return f"Rom(name={self.name!r}, size={len(self.data)})"

    @classmethod
    def from_file(cls, path):
        """load ROM file from user specified path, the name is the file name without extension"""
        path = Path(path)
        with open(path, mode='rb') as f:
            data = f.read()
        rom = cls(data, path.stem)
        log(f"The ROM at path {path} has been loaded successfully ({len(rom)} bytes)")
        return rom
