"""Simple two-language (en/ar) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "en": "Lunisolar Hijri Calendar",
        "ar": "التقويم الهجري القمري الشمسي",
    },
    "label_year": {
        "en": "Year",
        "ar": "السنة",
    },
    "label_month": {
        "en": "Month",
        "ar": "الشهر",
    },
    "label_source": {
        "en": "Phase table",
        "ar": "جدول أطوار القمر",
    },
    "loading": {
        "en": "Loading...",
        "ar": "جارٍ التحميل...",
    },
    "error": {
        "en": "Error: {error}",
        "ar": "خطأ: {error}",
    },
    "no_events": {
        "en": "No events found. Please check your CSV file.",
        "ar": "لم يتم العثور على أحداث. يرجى التحقق من ملف CSV.",
    },
    "pre_hijri": {
        "en": "Pre-Hijri",
        "ar": "قبل الهجرة",
    },
    "hijri_prefix": {
        "en": "Hijri",
        "ar": "هجري",
    },
    "gregorian_prefix": {
        "en": "Gregorian",
        "ar": "ميلادي",
    },
    "column_gregorian": {
        "en": "Gregorian",
        "ar": "الميلادي",
    },
    "column_phase": {
        "en": "Phase",
        "ar": "الطور",
    },
    "column_hijri": {
        "en": "Hijri",
        "ar": "الهجري",
    },
    "column_eclipse": {
        "en": "Eclipse",
        "ar": "الكسوف/الخسوف",
    },
    "weekdays": {
        "en": "Mon,Tue,Wed,Thu,Fri,Sat,Sun",
        "ar": "الاثنين,الثلاثاء,الأربعاء,الخميس,الجمعة,السبت,الأحد",
    },
    "gregorian_months": {
        "en": "January,February,March,April,May,June,July,August,September,October,November,December",
        "ar": "يناير,فبراير,مارس,أبريل,مايو,يونيو,يوليو,أغسطس,سبتمبر,أكتوبر,نوفمبر,ديسمبر",
    },
}

_HIJRI_MONTHS: dict[str, tuple[str, ...]] = {
    "en": (
        "Muharram",
        "Safar",
        "Rabi' al-Awwal",
        "Rabi' al-Thani",
        "Jumada al-Ula",
        "Jumada al-Thani",
        "Rajab",
        "Sha'ban",
        "Ramadan",
        "Shawwal",
        "Dhu al-Qi'dah",
        "Dhu al-Hijjah",
    ),
    "ar": (
        "محرم",
        "صفر",
        "ربيع الأول",
        "ربيع الآخر",
        "جمادى الأولى",
        "جمادى الآخرة",
        "رجب",
        "شعبان",
        "رمضان",
        "شوال",
        "ذو القعدة",
        "ذو الحجة",
    ),
}

_PHASES: dict[str, dict[str, str]] = {
    "New Moon": {"ar": "محاق"},
    "First Quarter": {"ar": "التربيع الأول"},
    "Full Moon": {"ar": "بدر"},
    "Last Quarter": {"ar": "التربيع الأخير"},
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


def hijri_month_name(month: int, lang: str) -> str:
    """Name of Hijri month 1..12."""
    names = _HIJRI_MONTHS.get(lang, _HIJRI_MONTHS["en"])
    return names[month - 1]


def phase_name(label: str, lang: str) -> str:
    """Localized phase label. Unknown labels and English pass through."""
    return _PHASES.get(label, {}).get(lang, label)


def gregorian_month_name(month: int, lang: str) -> str:
    """Name of Gregorian month 1..12."""
    return t("gregorian_months", lang).split(",")[month - 1]
