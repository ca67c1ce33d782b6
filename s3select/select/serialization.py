"""
Input and output format descriptors for SELECT requests

Scan params describe how objects are stored (format, compression, CSV
dialect). The response format is always the same: comma-separated text with
one record per line and no header.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from s3select.core.errors import ConfigError

FORMATS = ("parquet", "csv", "json")
COMPRESSIONS = {"none": "NONE", "gzip": "GZIP", "bzip2": "BZIP2"}

OUTPUT_SERIALIZATION: Dict[str, Any] = {
    "CSV": {"FieldDelimiter": ",", "RecordDelimiter": "\n"}
}


@dataclass(frozen=True)
class InputFormat:
    """
    Parsed scan params describing the stored objects

    Recognised params:
        format: parquet (default), csv or json
        compression: none (default), gzip or bzip2
        header: csv only, "true" (default) if the first line names the columns
        delimiter, quote, escape, comment: csv dialect
        multiline: json only, "true" if each object is one JSON document
    """

    format: str = "parquet"
    compression: str = "none"
    header: bool = True
    delimiter: str = ","
    quote: str = '"'
    escape: str | None = None
    comment: str | None = None
    multiline: bool = False

    @property
    def is_text(self) -> bool:
        """True when values arrive as untyped text (CSV)"""
        return self.format == "csv"

    @property
    def positional(self) -> bool:
        """True when columns can only be referenced by position"""
        return self.format == "csv" and not self.header

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "InputFormat":
        """
        Validate scan params

        Raises:
            ConfigError: If a param has an unsupported value
        """
        fmt = str(params.get("format", "parquet")).lower()
        if fmt not in FORMATS:
            raise ConfigError(f"Unsupported format '{fmt}'. Supported: {', '.join(FORMATS)}")

        compression = str(params.get("compression", "none")).lower()
        if compression not in COMPRESSIONS:
            raise ConfigError(
                f"Unsupported compression '{compression}'. Supported: {', '.join(COMPRESSIONS)}"
            )
        if fmt == "parquet" and compression != "none":
            raise ConfigError("Parquet objects are compressed internally; compression must be 'none'")

        delimiter = params.get("delimiter", ",")
        if len(delimiter) != 1:
            raise ConfigError(f"delimiter must be a single character, got {delimiter!r}")

        return cls(
            format=fmt,
            compression=compression,
            header=_param_bool(params, "header", True),
            delimiter=delimiter,
            quote=params.get("quote", '"'),
            escape=params.get("escape"),
            comment=params.get("comment"),
            multiline=_param_bool(params, "multiline", False),
        )

    def to_request(self) -> Dict[str, Any]:
        """Render as the InputSerialization argument of select_object_content"""
        serialization: Dict[str, Any] = {}

        if self.format == "parquet":
            serialization["Parquet"] = {}
        elif self.format == "csv":
            csv_input = {
                "FileHeaderInfo": "USE" if self.header else "NONE",
                "FieldDelimiter": self.delimiter,
                "RecordDelimiter": "\n",
                "QuoteCharacter": self.quote,
            }
            if self.escape is not None:
                csv_input["QuoteEscapeCharacter"] = self.escape
            if self.comment is not None:
                csv_input["Comments"] = self.comment
            serialization["CSV"] = csv_input
        else:
            serialization["JSON"] = {"Type": "DOCUMENT" if self.multiline else "LINES"}

        serialization["CompressionType"] = COMPRESSIONS[self.compression]
        return serialization


def _param_bool(params: Mapping[str, str], name: str, default: bool) -> bool:
    value = params.get(name)
    if value is None:
        return default
    text = str(value).strip().lower()
    if text not in ("true", "false"):
        raise ConfigError(f"{name} must be 'true' or 'false', got {value!r}")
    return text == "true"
