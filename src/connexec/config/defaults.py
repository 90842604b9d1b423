"""Default configuration values for connexec."""

# Default paths
CONFIG_DIR_NAME = ".connexec"
CONFIG_FILE_NAME = "config.yaml"
PROJECT_CONFIG_NAME = ".connexec.yaml"

# Default execution settings
DEFAULT_THREADS = 4
DEFAULT_OUTPUT_PREFIX = "result"
DEFAULT_FAILED_LOG = "login_failed_list.txt"
OUTPUT_DATE_FORMAT = "%Y-%m-%d"

# Default connection settings
DEFAULT_CONN_TIMEOUT = 10
DEFAULT_READ_TIMEOUT = 30

# Input file layout
COMMAND_SEPARATOR = ";"
INPUT_DELIMITER = ","
INPUT_COLUMNS = (
    "host",
    "username",
    "device_type",
    "password",
    "secret",
    "readtime",
    "mult_command",
)

# Default telemetry settings
DEFAULT_LOG_LEVEL = "INFO"

ENV_PREFIX = "CONNEXEC_"
