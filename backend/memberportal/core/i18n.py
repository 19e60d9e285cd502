"""
Localization Module
===================

Message catalogs keyed by message identifiers.

Texts may contain positional placeholders ``#VAR1#``, ``#VAR2#`` ...
that are replaced by the parameters passed to ``Language.get``.

Usage:
    l10n = Language("de")
    l10n.get("SYS_REGISTRATION_AT", ["01.02.2024", "10:15"])
"""

from typing import Optional, Sequence

from memberportal.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LANGUAGE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "SYS_DATABASE_VERSION": "Database version",
        "INS_WRONG_MYSQL_VERSION": (
            "#VAR1# requires at least version #VAR2# of your database. Please update your "
            "database server. An older release that still supports your database version "
            "can be found on our #VAR3#website#VAR4#."
        ),
        "INS_DATABASE_FILE_NOT_FOUND": "The file #VAR1# could not be found in the folder #VAR2#.",
        "INS_ERROR_OPEN_FILE": "The file #VAR1# could not be opened.",
        "SYS_NO_NEW_REGISTRATIONS": "There are no new registrations.",
        "SYS_REGISTRATION": "Registration",
        "SYS_REGISTRATION_AT": "Registered on #VAR1# at #VAR2#",
        "SYS_USERNAME": "Username",
        "SYS_EMAIL": "Email",
        "SYS_SHOW_PROFILE": "Show profile",
        "SYS_DELETE": "Delete",
        "SYS_ASSIGN_REGISTRATION": "Assign registration",
        "SYS_REGISTRATION_ASSIGNED": "The registration of #VAR1# has been approved.",
        "SYS_REGISTRATION_DELETED": "The registration of #VAR1# has been deleted.",
    },
    "de": {
        "SYS_DATABASE_VERSION": "Datenbankversion",
        "INS_WRONG_MYSQL_VERSION": (
            "#VAR1# benötigt mindestens Version #VAR2# deiner Datenbank. Bitte aktualisiere "
            "deinen Datenbankserver. Eine ältere Version, die deine Datenbank noch "
            "unterstützt, findest du auf unserer #VAR3#Webseite#VAR4#."
        ),
        "INS_DATABASE_FILE_NOT_FOUND": "Die Datei #VAR1# wurde im Ordner #VAR2# nicht gefunden.",
        "INS_ERROR_OPEN_FILE": "Die Datei #VAR1# konnte nicht geöffnet werden.",
        "SYS_NO_NEW_REGISTRATIONS": "Es sind keine neuen Registrierungen vorhanden.",
        "SYS_REGISTRATION": "Registrierung",
        "SYS_REGISTRATION_AT": "Registriert am #VAR1# um #VAR2# Uhr",
        "SYS_USERNAME": "Benutzername",
        "SYS_EMAIL": "E-Mail",
        "SYS_SHOW_PROFILE": "Profil anzeigen",
        "SYS_DELETE": "Löschen",
        "SYS_ASSIGN_REGISTRATION": "Registrierung zuordnen",
        "SYS_REGISTRATION_ASSIGNED": "Die Registrierung von #VAR1# wurde freigegeben.",
        "SYS_REGISTRATION_DELETED": "Die Registrierung von #VAR1# wurde gelöscht.",
    },
}


class Language:
    """
    Resolves message identifiers to localized texts.

    Unknown languages fall back to English; unknown identifiers
    are returned unchanged so missing translations stay visible.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        if language not in MESSAGES:
            logger.warning("Unknown language requested, falling back", language=language)
            language = DEFAULT_LANGUAGE
        self.language = language
        self._catalog = MESSAGES[language]

    def get(self, text_id: str, params: Optional[Sequence[object]] = None) -> str:
        """
        Get the text for a message identifier.

        Args:
            text_id: Message identifier, e.g. SYS_EMAIL
            params: Values for #VAR1#, #VAR2# ... in order

        Returns:
            Localized text with placeholders replaced
        """
        text = self._catalog.get(text_id) or MESSAGES[DEFAULT_LANGUAGE].get(text_id)
        if text is None:
            logger.warning("Missing translation", text_id=text_id, language=self.language)
            return text_id

        for index, value in enumerate(params or [], start=1):
            text = text.replace(f"#VAR{index}#", str(value))
        return text
