"""Protocol layer: header framing, flags, command builders, and reply parsing."""

from .framing import IncomingHeader, OutgoingHeader, decode_incoming, encode_outgoing
from .flags import Flag, FlagMask, encode_flags, decode_flags
from .commands import Command, build_command
from .parser import parse_dir_listing
from .reader import Reply, ResponseReader
