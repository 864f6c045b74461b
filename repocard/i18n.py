from __future__ import annotations
from typing import Dict, Optional

FALLBACK_LOCALE = "en"

REPO_CARD_LOCALES: Dict[str, Dict[str, str]] = {
    "repocard.template": {
        "ar": "قالب", "cn": "模板", "zh-tw": "模板", "cs": "Šablona", "de": "Vorlage",
        "en": "Template", "bn": "টেমপ্লেট", "es": "Plantilla", "fr": "Modèle", "hu": "Sablon",
        "it": "Template", "ja": "テンプレート", "kr": "템플릿", "nl": "Sjabloon", "pt-pt": "Modelo",
        "pt-br": "Modelo", "el": "Πρότυπο", "ru": "Шаблон", "uk-ua": "Шаблон", "id": "Pola",
        "sk": "Šablóna", "tr": "Şablon", "pl": "Szablony", "vi": "Mẫu", "se": "Mall",
        "he": "תבנית", "fil": "Template", "th": "เทมเพลต", "no": "Mal",
    },
    "repocard.archived": {
        "ar": "مُؤرشف", "cn": "已归档", "zh-tw": "已封存", "cs": "Archivováno", "de": "Archiviert",
        "en": "Archived", "bn": "আর্কাইভড", "es": "Archivados", "fr": "Archivé", "hu": "Archivált",
        "it": "Archiviata", "ja": "アーカイブ済み", "kr": "보관됨", "nl": "Gearchiveerd", "pt-pt": "Arquivados",
        "pt-br": "Arquivados", "el": "Αρχειοθετημένα", "ru": "Архивирован", "uk-ua": "Архивовано", "id": "Arsip",
        "sk": "Archivované", "tr": "Arşiv", "pl": "Zarchiwizowano", "vi": "Đã Lưu Trữ", "se": "Arkiverade",
        "he": "גנוז", "fil": "Naka-arkibo", "th": "เก็บถาวร", "no": "Arkivert",
    },
}

AVAILABLE_LOCALES = sorted(REPO_CARD_LOCALES["repocard.archived"])


def is_locale_available(locale: Optional[str]) -> bool:
    return bool(locale) and locale.lower() in AVAILABLE_LOCALES


class I18n:
    def __init__(self, locale: Optional[str] = None):
        self.locale = (locale or FALLBACK_LOCALE).lower()

    def t(self, key: str) -> str:
        entry = REPO_CARD_LOCALES.get(key, {})
        return entry.get(self.locale) or entry.get(FALLBACK_LOCALE, key)
