from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

"""Legacy .xls -> .xlsx conversion through LibreOffice (headless).

The converter writes ``<output_dir>/<input stem>.xlsx``. Callers own the
output directory (typically a temporary directory) and its cleanup.
"""

__all__ = [
    "LegacyConversionError",
    "is_legacy_workbook",
    "convert_xls_to_xlsx",
]

logger = logging.getLogger(__name__)


class LegacyConversionError(Exception):
    """Raised when a .xls workbook cannot be converted to .xlsx."""


def is_legacy_workbook(path: Path) -> bool:
    return path.suffix.lower() == ".xls"


def _explain_failure(output: str) -> str:
    lowered = output.lower()
    if "password" in lowered or "mot de passe" in lowered:
        return "Le fichier est protégé par mot de passe."
    if "permission" in lowered or "access denied" in lowered or "accès refusé" in lowered:
        return "Accès refusé. Vérifiez les permissions du fichier."
    if "format" in lowered or "corrupt" in lowered:
        return "Le fichier est corrompu ou dans un format non supporté."
    return f"Erreur lors de la conversion: {output}"


def convert_xls_to_xlsx(
    input_path: Path,
    output_dir: Path,
    *,
    soffice_binary: str = "soffice",
    timeout_seconds: float = 120.0,
) -> Path:
    """Convert ``input_path`` (.xls) into an .xlsx file inside ``output_dir``.

    Raises:
        LegacyConversionError: source missing, office suite not installed,
            conversion failure/timeout, or no output file produced
    """
    if not input_path.exists():
        raise LegacyConversionError(f"Fichier source introuvable: {input_path}")

    binary = shutil.which(soffice_binary)
    if binary is None:
        raise LegacyConversionError(
            f"LibreOffice ({soffice_binary}) est requis pour ouvrir les fichiers .xls. "
            "Vérifiez qu'il est bien installé."
        )

    output_dir.mkdir(parents=True, exist_ok=True)
    command = [
        binary,
        "--headless",
        "--norestore",
        "--convert-to",
        "xlsx",
        "--outdir",
        str(output_dir),
        str(input_path),
    ]
    logger.debug(f"convert_xls_to_xlsx start input={input_path} outdir={output_dir}")
    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise LegacyConversionError(
            f"Conversion .xls interrompue après {timeout_seconds:g} s: {input_path}"
        ) from e
    except OSError as e:
        raise LegacyConversionError(f"Erreur au lancement de LibreOffice: {e}") from e

    if completed.returncode != 0:
        output = (completed.stderr or "").strip() or (completed.stdout or "").strip()
        logger.error(
            f"convert_xls_to_xlsx failed code={completed.returncode} input={input_path} output={output}"
        )
        if output:
            raise LegacyConversionError(_explain_failure(output))
        raise LegacyConversionError("Échec de conversion du fichier .xls")

    converted = output_dir / f"{input_path.stem}.xlsx"
    if not converted.exists():
        raise LegacyConversionError("La conversion a échoué: fichier de sortie non créé.")
    logger.debug(f"convert_xls_to_xlsx done output={converted}")
    return converted
