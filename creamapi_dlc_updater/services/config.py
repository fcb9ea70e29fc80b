"""Configuration services: run settings validation and the CreamAPI INI file."""

import configparser
from collections.abc import Iterable
from pathlib import Path

import structlog

from ..models import DlcRecord, UpdaterConfig
from .errors import ConfigLoadError, PersistError

log = structlog.stdlib.get_logger()

STEAM_SECTION = "steam"
APPID_KEY = "appid"
DLC_SECTION = "dlc"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SECTION_HEADER = configparser.ConfigParser.SECTCRE
COMMENT_PREFIXES = ("#", ";")


def _is_blank(line: str) -> bool:
    return not line.strip()


def _is_comment(line: str) -> bool:
    return line.strip().startswith(COMMENT_PREFIXES)


def _is_section_header(line: str, name: str | None = None) -> bool:
    match = SECTION_HEADER.match(line.strip())
    if match is None:
        return False
    return name is None or match.group("header") == name


def render_dlc_section(text: str, entries: dict[str, str]) -> str:
    """Return ``text`` with the ``[dlc]`` entries replaced by ``entries``.

    Lines outside the section are kept exactly as they are, comments included.
    Comment lines inside the section stay above the new entries, and comments
    separated from the next section header by nothing but other comments go
    with that header. Without a ``[dlc]`` section one is appended.
    """
    newline = "\r\n" if "\r\n" in text else "\n"
    entry_lines = [
        f"{key} = {value}".replace("\n", newline + "\t") + newline
        for key, value in entries.items()
    ]

    lines = text.splitlines(keepends=True)
    output: list[str] = []
    written = False
    index = 0

    while index < len(lines):
        line = lines[index]
        if not _is_section_header(line, DLC_SECTION):
            output.append(line)
            index += 1
            continue

        end = index + 1
        while end < len(lines) and not _is_section_header(lines[end]):
            end += 1
        body = lines[index + 1:end]
        has_following = end < len(lines)

        # Trailing blank and comment lines, split off where they belong to the next section
        run_start = len(body)
        while run_start > 0 and (_is_blank(body[run_start - 1]) or _is_comment(body[run_start - 1])):
            run_start -= 1
        first_blank = next((i for i in range(run_start, len(body)) if _is_blank(body[i])), None)
        if first_blank is not None:
            tail_start = first_blank
        else:
            tail_start = run_start if has_following else len(body)
        tail = body[tail_start:]

        if not written:
            output.append(line if line.endswith(("\n", "\r")) else line + newline)
            for comment in (body_line for body_line in body[:tail_start] if _is_comment(body_line)):
                output.append(comment if comment.endswith(("\n", "\r")) else comment + newline)
            output.extend(entry_lines)
            if has_following and not (tail and _is_blank(tail[0])):
                output.append(newline)
            written = True
        output.extend(tail)
        index = end

    if not written:
        if output and not output[-1].endswith(("\n", "\r")):
            output.append(newline)
        if any(not _is_blank(line) for line in output):
            output.append(newline)
        output.append(f"[{DLC_SECTION}]{newline}")
        output.extend(entry_lines)

    return "".join(output)


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


def validate_config(config: UpdaterConfig) -> ValidationResult:
    """Validate run settings."""
    errors = []

    if not isinstance(config.ini_path, Path):
        errors.append("ini_path must be a Path object")
    elif config.ini_path.exists() and config.ini_path.is_dir():
        errors.append("ini_path must point to a file, not a directory")

    if not isinstance(config.log_path, Path):
        errors.append("log_path must be a Path object")

    if not isinstance(config.timeout, (int, float)) or isinstance(config.timeout, bool) or config.timeout <= 0:
        errors.append("timeout must be a positive number of seconds")

    if config.log_level not in VALID_LOG_LEVELS:
        errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

    for name in ("app_details_url", "app_list_url"):
        url = getattr(config, name)
        if not isinstance(url, str) or not url.startswith(("http://", "https://")):
            errors.append(f"{name} must be an http(s) URL")

    return ValidationResult(len(errors) == 0, errors)


class CreamApiConfigService:
    """Reads and rewrites a CreamAPI ``cream_api.ini`` file.

    The document is held in memory between ``load`` and ``save``. Changes made
    with ``replace_dlc_section`` only reach the disk on ``save``, which writes a
    temporary file beside the original and renames it into place. ``save``
    rewrites the ``[dlc]`` block of the raw text and leaves the rest of the
    file, comments included, untouched.
    """

    def __init__(self, ini_path: Path) -> None:
        self.ini_path = ini_path
        self._parser = self._new_parser()
        self._text = ""
        self._pending_dlc: dict[str, str] | None = None
        self._loaded = False

    @staticmethod
    def _new_parser() -> configparser.ConfigParser:
        # DLC names are written verbatim, so no '%' interpolation
        parser = configparser.ConfigParser(interpolation=None, strict=False, allow_no_value=True)
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        return parser

    @property
    def document(self) -> configparser.ConfigParser:
        """The in-memory INI document."""
        return self._parser

    def load(self) -> configparser.ConfigParser:
        """Load the INI file from disk.

        Raises:
            ConfigLoadError: If the file is missing, unreadable or not valid INI
        """
        if not self.ini_path.is_file():
            raise ConfigLoadError(f"INI file not found at '{self.ini_path}'", path=str(self.ini_path))

        parser = self._new_parser()
        try:
            # utf-8-sig tolerates the BOM some Windows editors prepend
            with open(self.ini_path, "r", encoding="utf-8-sig", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError("Failed to read INI file", path=str(self.ini_path), original_error=e) from e

        try:
            parser.read_string(text, source=str(self.ini_path))
        except configparser.Error as e:
            raise ConfigLoadError("Failed to parse INI file", path=str(self.ini_path), original_error=e) from e

        self._parser = parser
        self._text = text
        self._pending_dlc = None
        self._loaded = True
        log.info("INI file loaded", path=str(self.ini_path), sections=parser.sections())
        return parser

    def get_app_id(self) -> str:
        """Return ``[steam] appid``.

        Raises:
            ConfigLoadError: If the section or key is missing or empty
        """
        if not self._loaded:
            self.load()

        app_id = (self._parser.get(STEAM_SECTION, APPID_KEY, fallback="") or "").strip()
        if not app_id:
            raise ConfigLoadError(
                "Could not read appid from INI",
                path=str(self.ini_path),
                setting=f"{STEAM_SECTION}.{APPID_KEY}",
            )
        return app_id

    def replace_dlc_section(self, records: Iterable[DlcRecord]) -> None:
        """Drop the ``[dlc]`` section and rebuild it from ``records``, in memory only.

        Raises:
            PersistError: If the section cannot be created
        """
        self._parser.remove_section(DLC_SECTION)
        try:
            self._parser.add_section(DLC_SECTION)
        except (configparser.Error, ValueError) as e:
            raise PersistError("Failed to create DLC section", path=str(self.ini_path), original_error=e) from e

        section = self._parser[DLC_SECTION]
        for record in records:
            section[str(record.id)] = record.name
        self._pending_dlc = self.get_dlc_section()

    def get_dlc_section(self) -> dict[str, str]:
        """Return the current ``[dlc]`` entries (empty if the section is absent)."""
        if not self._parser.has_section(DLC_SECTION):
            return {}
        return {key: value or "" for key, value in self._parser.items(DLC_SECTION, raw=True)
                if key not in self._parser.defaults()}

    def save(self) -> None:
        """Write the document back to ``ini_path`` atomically.

        Raises:
            PersistError: If the file cannot be written; the original is left intact
        """
        temp_path = self.ini_path.with_suffix(self.ini_path.suffix + ".tmp")
        log.debug("Saving INI file", path=str(self.ini_path), temp_path=str(temp_path))

        text = self._text
        if self._pending_dlc is not None:
            text = render_dlc_section(text, self._pending_dlc)

        try:
            with open(temp_path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            temp_path.replace(self.ini_path)
        except OSError as e:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    log.warning("Failed to clean up temporary INI file", path=str(temp_path))
            raise PersistError("Failed to save INI file", path=str(self.ini_path), original_error=e) from e

        self._text = text
        self._pending_dlc = None
        log.info("INI file saved", path=str(self.ini_path), size=self.ini_path.stat().st_size)
