from __future__ import annotations

OPERAND_COUNT = 2
HEADER_FIELDS = 3  # kind, mode, function_id
WORD_SIZE = 4
U32_MAX = 0xFFFFFFFF

# packet kinds
REQUEST = 1
RESPONSE = 2
ERROR = 3

# packet modes
MODE_CLIENT = 1
MODE_SERVER = 2

# function ids
FID_MULTIPLY = 1
FID_DIVIDE = 2

# error codes carried in operand 0 of an error packet
ERR_GENERAL = 1
ERR_INVALID_TYPE = 2
ERR_INVALID_MODE = 3
ERR_FUNC_EXEC = 4
ERR_NO_SUCH_FUNCTION = 5

DEFAULT_PORT = 11111
DEFAULT_SERVER_HOST = "127.0.0.1"
MAX_ADDRESS_LEN = 253  # longest DNS name

CLIENT_TIMEOUT_S = 5.0
SERVER_TIMEOUT_S = 10.0
RECV_BUFSIZE = 65535

# status indicator characters
STATUS_IDLE = "0"
STATUS_MULTIPLY = "1"
STATUS_DIVIDE = "2"
STATUS_DIVIDE_ERROR = "E"
STATUS_NO_SUCH_FUNCTION = "F"
DEFAULT_STATUS_DEVICE = "/dev/7segment"
