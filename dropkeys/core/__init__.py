from dropkeys.core.errors import DropKeysError, KeyListSyntaxError, RecordDecodeError, RecordEncodeError
from dropkeys.core.filtering import drop_keys, process_line
from dropkeys.core.keypaths import KeyPathIndex, add_key_path, build_key_index
from dropkeys.core.literal_array import parse_single_quoted_array

__all__ = [
    "DropKeysError",
    "KeyListSyntaxError",
    "RecordDecodeError",
    "RecordEncodeError",
    "KeyPathIndex",
    "add_key_path",
    "build_key_index",
    "drop_keys",
    "process_line",
    "parse_single_quoted_array",
]
