"""Narrative report generation with Gemini and Google Search grounding."""
from typing import List, Optional, Sequence
from urllib.parse import urlparse

from google import genai
from google.genai import types

from ..config.manager import Config
from ..ingest.models import Transaction
from ..utils.exceptions import ExternalServiceError
from ..utils.logger import get_logger

logger = get_logger()

# Failed requests return text starting with this marker instead of raising.
ERROR_MARKER = "Error"
ERROR_REPORT = (
    f"{ERROR_MARKER} al conectar con el servicio de IA. "
    "Por favor verifique su configuración."
)
EMPTY_REPORT = "No se pudo generar el análisis."
SOURCES_HEADING = "### 🌐 Fuentes de Información (Search Grounding)"

SYSTEM_INSTRUCTION = """
Eres el motor de Inteligencia Artificial del "Mapa Piloto de Expansión Económica (RPEE)" del Gobierno de Yucatán.
Tu objetivo es apoyar a la Secretaría de Economía y Desarrollo Urbano (SEFOET) en la planeación urbana basada en evidencia.

Estás analizando datos representados en un "Mapa de Hotspots" (Scatter plot).

DEBES GENERAR UN REPORTE CON LAS SIGUIENTES SECCIONES:

1. 🗺️ DETECCIÓN DE HOTSPOTS (Clusterización):
Identifica los clústeres visuales basados en los datos:
- **Alta Prioridad**: Zonas con alta densidad de transacciones o montos muy elevados (ej. Industrias o desarrollos masivos).
- **En Desarrollo**: Zonas con actividad incipiente pero constante.
*Explica específicamente qué municipios (ej. Hunucmá vs Mérida) están impulsando qué tipo de economía (Industrial vs Residencial).*

2. 📈 ANÁLISIS DE SERIES TEMPORALES:
Detecta si hay una tendencia de crecimiento o declive basada en las fechas de las transacciones.

3. 🏙️ RECOMENDACIONES DE POLÍTICA PÚBLICA:
Sugerir acciones concretas.
- Si hay zona industrial (Hunucmá/Umán): Recomendar carreteras de carga, subestaciones eléctricas.
- Si hay zona residencial (Mérida Norte/Temozón): Recomendar servicios de agua, transporte público y escuelas.

IMPORTANTE:
- Usa la herramienta de búsqueda de Google para validar si existen proyectos reales mencionados y enriquece tu análisis con ese contexto.

REGLAS:
- Recuerda que estás procesando datos sintéticos para proteger la privacidad.
- Mantén un tono técnico, objetivo y gubernamental.
- Usa formato Markdown limpio.
"""

PROMPT_PREFIX = (
    "Analiza el siguiente conjunto de datos sintéticos de transacciones "
    "inmobiliarias recientes en Yucatán para el reporte RPEE:\n\n"
)


def is_error_report(text: str) -> bool:
    """True when ``text`` is the failure sentinel of a report request."""
    return text.startswith(ERROR_MARKER)


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else str(amount)


def build_digest(transactions: Sequence[Transaction]) -> str:
    """One plain-text line per transaction."""
    return "\n".join(
        f"{txn.date}: {txn.municipality} ({txn.zone}) - ${_format_amount(txn.amount)} MXN - Tipo: {txn.type}"
        for txn in transactions
    )


def extract_sources(response) -> List[str]:
    """Unique web URIs from the grounding metadata of the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources: List[str] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if uri and uri not in sources:
            sources.append(uri)
    return sources


def format_sources(sources: Sequence[str]) -> str:
    """Markdown section listing each source as a hostname link."""
    lines = [f"\n\n{SOURCES_HEADING}\n"]
    for source in sources:
        hostname = urlparse(source).hostname or source
        lines.append(f"- [{hostname}]({source})\n")
    return "".join(lines)


class NarrativeReporter:
    """Requests a narrative analysis of a transaction set from Gemini."""

    def __init__(self, config: Config, client: Optional[genai.Client] = None):
        """
        Initialize reporter.

        Args:
            config: Runtime configuration (API key, model)
            client: Pre-built client; created from the API key when omitted
        """
        self.config = config
        self.client = client
        self.model_name = config.model_name

    def request(self, transactions: Sequence[Transaction]) -> str:
        """
        Generate the narrative report.

        Never raises: on any failure the returned text starts with
        ``ERROR_MARKER``.

        Args:
            transactions: Filtered transactions to analyze

        Returns:
            Markdown report, with a sources section when grounding returned any
        """
        try:
            response = self._generate(PROMPT_PREFIX + build_digest(transactions))
        except Exception as e:
            logger.error(f"Error calling Gemini API: {e}")
            return ERROR_REPORT

        report = getattr(response, "text", None) or EMPTY_REPORT

        sources = extract_sources(response)
        if sources:
            report += format_sources(sources)

        logger.info(
            f"Narrative report generated for {len(transactions)} transactions "
            f"({len(sources)} sources)"
        )
        return report

    def _generate(self, prompt: str):
        client = self._get_client()
        logger.debug(f"Sending {len(prompt)} characters to {self.model_name}")
        return client.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=self._build_generation_config()
        )

    def _get_client(self) -> genai.Client:
        if self.client is None:
            if not self.config.gemini_api_key:
                raise ExternalServiceError("Gemini API key is not configured")
            self.client = genai.Client(api_key=self.config.gemini_api_key)
        return self.client

    def _build_generation_config(self) -> types.GenerateContentConfig:
        tools = []
        if self.config.search_grounding:
            tools.append(types.Tool(google_search=types.GoogleSearch()))

        return types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            tools=tools or None,
            thinking_config=types.ThinkingConfig(thinking_budget=self.config.thinking_budget)
        )
