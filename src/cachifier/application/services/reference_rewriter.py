from __future__ import annotations

import re
from typing import Mapping

from cachifier.core.files import posix_path


class ReferenceRewriter:
    """Literal path substitution over the text of stylesheets and scripts.

    All keys are matched in one left-to-right pass with the longest key tried
    first at each position, so ``img/a.png`` wins over ``a.png`` and a
    replacement is never scanned again.
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self.mapping = {
            posix_path(old): posix_path(new)
            for old, new in mapping.items()
            if old and posix_path(old) != posix_path(new)
        }
        if self.mapping:
            keys = sorted(self.mapping, key=lambda key: (-len(key), key))
            self._pattern: re.Pattern[str] | None = re.compile("|".join(re.escape(key) for key in keys))
        else:
            self._pattern = None

    def __len__(self) -> int:
        return len(self.mapping)

    def rewrite(self, text: str) -> str:
        if self._pattern is None or not text:
            return text
        return self._pattern.sub(lambda match: self.mapping[match.group(0)], text)
