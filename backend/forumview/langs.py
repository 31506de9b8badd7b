import json
import pathlib
import structlog

logger = structlog.get_logger(__name__)

class LangPropsService:
    """Language key/value tables, one JSON file per locale (``en_US.json``)."""

    def __init__(self, lang_dir: str, default_locale: str):
        self.lang_dir = pathlib.Path(lang_dir)
        self.default_locale = default_locale
        self._cache: dict[str, dict[str, str]] = {}

    def _load(self, locale: str) -> dict[str, str] | None:
        if locale in self._cache:
            return self._cache[locale]
        path = self.lang_dir / f"{locale}.json"
        if not path.exists():
            return None
        langs = json.loads(path.read_text(encoding="utf-8"))
        self._cache[locale] = langs
        return langs

    def get_all(self, locale: str) -> dict[str, str]:
        langs = self._load(locale)
        if langs is None and "_" in locale:
            langs = self._load(locale.split("_")[0])
        if langs is None:
            if locale != self.default_locale:
                logger.debug("locale fallback", locale=locale, default=self.default_locale)
            langs = self._load(self.default_locale)
        if langs is None:
            raise FileNotFoundError(f"no language file for {self.default_locale} in {self.lang_dir}")
        return dict(langs)
