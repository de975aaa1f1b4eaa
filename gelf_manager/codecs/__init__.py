from gelf_manager.codecs.base import ICodec, Record, encode_record, parse_record
from gelf_manager.codecs.decompressor import Decompressor
from gelf_manager.codecs.factory import create_codec
from gelf_manager.codecs.gzip_codec import GzipCodec
from gelf_manager.codecs.zlib_codec import ZlibCodec

__all__ = [
    "ICodec",
    "Record",
    "encode_record",
    "parse_record",
    "Decompressor",
    "create_codec",
    "GzipCodec",
    "ZlibCodec",
]
