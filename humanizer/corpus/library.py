"""File-based reference library.

Layout: one sub-directory per style category, each holding .txt or .md
documents. A distribution maps category names to percent weights; a
category's weight is split evenly across its documents.

    library/
        user/email.txt
        marketing/sales_page.md
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ..utils.logging import get_logger

logger = get_logger(__name__)

DOCUMENT_SUFFIXES = (".txt", ".md")
MAX_INPUT_CHARS = 500000


@dataclass(frozen=True)
class ReferenceDocument:
    name: str
    category: str
    text: str
    weight: float


class ReferenceLibrary:
    """Reference-library provider: documents() -> weighted reference texts."""

    def __init__(self, root: str, distribution: Optional[Dict[str, float]] = None):
        """Initialize the library.

        Args:
            root: Directory holding one sub-directory per category. Files placed
                directly in root belong to the "user" category.
            distribution: Category -> percent weight. Categories not listed get
                weight 0 when a distribution is given, 1 otherwise.
        """
        self.root = Path(root)
        self.distribution = distribution

    def categories(self) -> Dict[str, List[Path]]:
        if not self.root.is_dir():
            logger.warning(f"Reference library not found: {self.root}")
            return {}

        found: Dict[str, List[Path]] = {}
        for path in sorted(self.root.iterdir()):
            if path.is_dir():
                files = sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() in DOCUMENT_SUFFIXES)
                if files:
                    found.setdefault(path.name, []).extend(files)
            elif path.suffix.lower() in DOCUMENT_SUFFIXES:
                found.setdefault("user", []).append(path)
        return found

    def _category_weight(self, category: str) -> float:
        if self.distribution is None:
            return 1.0
        return float(self.distribution.get(category, 0.0))

    def documents(self) -> List[ReferenceDocument]:
        """Snapshot of all documents in weighted categories.

        Weights are normalized to percentages summing to 100 across documents.
        """
        raw = []
        for category, files in self.categories().items():
            weight = self._category_weight(category)
            if weight <= 0:
                continue
            texts = [(path, path.read_text(encoding="utf-8", errors="replace")[:MAX_INPUT_CHARS]) for path in files]
            kept = [(path, text) for path, text in texts if text.strip()]
            for path, text in kept:
                raw.append((category, path, text, weight / len(kept)))

        total = sum(w for _, _, _, w in raw)
        documents = [
            ReferenceDocument(name=f"{category}/{path.name}", category=category, text=text, weight=w * 100.0 / total)
            for category, path, text, w in raw
        ]
        logger.info(f"Loaded {len(documents)} reference documents from {self.root}")
        return documents

    @classmethod
    def from_config(cls, config: Dict, root: Optional[str] = None) -> "ReferenceLibrary":
        library_config = config.get("library", {})
        return cls(root or library_config.get("path", "library"), library_config.get("distribution"))


class StaticLibrary:
    """In-memory reference library, for callers that already hold the texts."""

    def __init__(self, texts: List[str], weights: Optional[List[float]] = None):
        weights = weights or [1.0] * len(texts)
        total = sum(weights) or 1.0
        self._documents = [
            ReferenceDocument(name=f"document_{i + 1}", category="user", text=text, weight=w * 100.0 / total)
            for i, (text, w) in enumerate(zip(texts, weights))
        ]

    def documents(self) -> List[ReferenceDocument]:
        return list(self._documents)
