from __future__ import annotations

from enum import IntEnum

from .errors import UnsupportedVersionError


class Version(IntEnum):
    R10 = 1006
    R11 = 1009
    R12 = 1009
    R13 = 1012
    R14 = 1014
    R2000 = 1015
    R2000I = 1016
    R2002 = 1017
    R2004 = 1018
    R2005 = 1019
    R2006 = 1020
    R2007 = 1021
    R2008 = 1022
    R2009 = 1023
    R2010 = 1024
    R2011 = 1025
    R2012 = 1026
    R2013 = 1027
    R2018 = 1032

    @property
    def acad_string(self) -> str:
        return f"AC{int(self)}"

    @property
    def release_name(self) -> str:
        # AC1009 covers R11 and R12; files of that release identify as R12.
        return "R12" if self is Version.R11 else self.name

    def applies(self, since: "Version | None" = None, until: "Version | None" = None) -> bool:
        if since is not None and self < since:
            return False
        if until is not None and self > until:
            return False
        return True

    @classmethod
    def parse(cls, text: "str | int | Version") -> "Version":
        if isinstance(text, Version):
            return text
        if isinstance(text, int):
            try:
                return cls(text)
            except ValueError:
                raise UnsupportedVersionError(f"unsupported DXF version: {text}") from None
        name = str(text).strip().upper()
        if name.startswith("AC"):
            try:
                return cls(int(name[2:]))
            except ValueError:
                raise UnsupportedVersionError(f"unsupported DXF version: {text}") from None
        if not name.startswith("R"):
            name = f"R{name}"
        try:
            return cls[name]
        except KeyError:
            raise UnsupportedVersionError(f"unsupported DXF version: {text}") from None


SUPPORTED_VERSIONS = tuple(sorted({version.acad_string for version in Version}))
