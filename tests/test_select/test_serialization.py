"""Tests for input/output serialization descriptors"""

import pytest

from s3select.core.errors import ConfigError
from s3select.select.serialization import OUTPUT_SERIALIZATION, InputFormat


def test_defaults_to_parquet():
    fmt = InputFormat.from_params({})

    assert fmt.format == "parquet"
    assert fmt.to_request() == {"Parquet": {}, "CompressionType": "NONE"}
    assert not fmt.is_text


def test_csv_with_header():
    fmt = InputFormat.from_params({"format": "CSV", "compression": "gzip"})

    assert fmt.is_text
    assert not fmt.positional
    assert fmt.to_request() == {
        "CSV": {
            "FileHeaderInfo": "USE",
            "FieldDelimiter": ",",
            "RecordDelimiter": "\n",
            "QuoteCharacter": '"',
        },
        "CompressionType": "GZIP",
    }


def test_csv_dialect_without_header():
    fmt = InputFormat.from_params(
        {"format": "csv", "header": "false", "delimiter": "|", "escape": "\\", "comment": "#"}
    )

    assert fmt.positional
    csv_input = fmt.to_request()["CSV"]
    assert csv_input["FileHeaderInfo"] == "NONE"
    assert csv_input["FieldDelimiter"] == "|"
    assert csv_input["QuoteEscapeCharacter"] == "\\"
    assert csv_input["Comments"] == "#"


@pytest.mark.parametrize("multiline, kind", [("false", "LINES"), ("true", "DOCUMENT")])
def test_json(multiline, kind):
    fmt = InputFormat.from_params({"format": "json", "multiline": multiline, "compression": "bzip2"})

    assert fmt.to_request() == {"JSON": {"Type": kind}, "CompressionType": "BZIP2"}


@pytest.mark.parametrize(
    "params, message",
    [
        ({"format": "orc"}, "Unsupported format"),
        ({"format": "csv", "compression": "zstd"}, "Unsupported compression"),
        ({"format": "parquet", "compression": "gzip"}, "compression must be 'none'"),
        ({"format": "csv", "delimiter": "||"}, "single character"),
        ({"format": "csv", "header": "yes"}, "header must be 'true' or 'false'"),
    ],
)
def test_invalid_params(params, message):
    with pytest.raises(ConfigError, match=message):
        InputFormat.from_params(params)


def test_output_is_plain_csv():
    assert OUTPUT_SERIALIZATION == {"CSV": {"FieldDelimiter": ",", "RecordDelimiter": "\n"}}
