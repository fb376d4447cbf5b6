"""Custom exception classes for RPEE."""


class RpeeError(Exception):
    """Base exception for RPEE."""
    pass


class ConfigError(RpeeError):
    """Configuration-related errors."""
    pass


class ValidationError(RpeeError):
    """Data validation errors."""
    pass


class ExternalServiceError(RpeeError):
    """Generative service errors (missing credential, transport failure)."""
    pass


# Ingestion errors. ``code`` is the name surfaced on a failed ParseResult.
class IngestionError(RpeeError):
    """Base class for structural failures that abort a whole load."""
    code = "IngestionError"
    message = "No se pudo procesar el archivo."

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class EmptyOrHeaderOnlyError(IngestionError):
    """CSV has no data lines."""
    code = "EmptyOrHeaderOnly"
    message = "El archivo CSV está vacío o solo contiene cabeceras."


class MissingRequiredColumnsError(IngestionError):
    """CSV header lacks the amount or municipality column."""
    code = "MissingRequiredColumns"
    message = "Faltan columnas requeridas: municipio, monto."


class CsvFormatError(IngestionError):
    """Unexpected failure while reading CSV text."""
    code = "CsvFormatError"
    message = "Error al procesar el formato CSV."


class NotAnArrayError(IngestionError):
    """JSON top-level value is not an array."""
    code = "NotAnArray"
    message = "El JSON debe ser un array de objetos."


class JsonSyntaxError(IngestionError):
    """JSON text could not be parsed or has an unusable structure."""
    code = "JsonSyntaxError"
    message = "Error de sintaxis JSON."


class UnsupportedFormatError(IngestionError):
    """File extension or format name is neither CSV nor JSON."""
    code = "UnsupportedFormat"
    message = "Formato no soportado. Use archivos .csv o .json."


class FileReadError(IngestionError):
    """Input file could not be read or decoded as UTF-8."""
    code = "FileReadError"
    message = "No se pudo leer el archivo."
