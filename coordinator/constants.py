import os

# Suffix identifying a Rank-1 Constraint System circuit file
R1CS_SUFFIX = ".r1cs"
# Suffix of Powers of Tau parameter files
PTAU_SUFFIX = ".ptau"
# Suffix of the zkey artifacts
ZKEY_SUFFIX = ".zkey"
# Index of the initial zkey (no contributions yet), rendered with 5 digits
INITIAL_ZKEY_INDEX = "00000"

# Powers of Tau file name prefix, followed by the two-digit exponent
POT_FILENAME_TEMPLATE = "powersOfTau28_hez_final_"
# Location of the Perpetual Powers of Tau files, followed by the file name
POT_DOWNLOAD_URL_TEMPLATE = "https://hermez.s3-eu-west-1.amazonaws.com/"
# Smallest exponent handed out for degenerate circuits
MIN_POT_EXPONENT = 2
# Largest exponent published by the Powers of Tau source
MAX_POT_EXPONENT = 28

# Storage namespace names
POT_STORAGE_NAME = "pot"
CIRCUITS_COLLECTION = "circuits"
CONTRIBUTIONS_COLLECTION = "contributions"

# Local output layout
OUTPUT_DIR_NAME = ".phase2cli"
SETUP_DIR_NAME = "setup"
METADATA_DIR_NAME = "metadata"
POT_DIR_NAME = "pot"
ZKEYS_DIR_NAME = "zkeys"
METADATA_FILENAME_SUFFIX = "_metadata.log"

# snarkjs installation
SNARKJS_VERSION = "0.7.4"
LOCAL_SNARKJS_INSTALL_DIR = os.path.join(os.path.expanduser("~"), ".snarkjs")
LOCAL_SNARKJS_PATH = os.path.join(
    LOCAL_SNARKJS_INSTALL_DIR, "node_modules", ".bin", "snarkjs"
)
# Minimum Node.js major version required by snarkjs
MIN_NODEJS_MAJOR_VERSION = 20

# Storage credentials are only ever read from the environment
STORAGE_ACCESS_KEY_ENV = "PHASE2_STORAGE_ACCESS_KEY"
STORAGE_SECRET_KEY_ENV = "PHASE2_STORAGE_SECRET_KEY"

# Various time constants in seconds
ONE_SECOND = 1
ONE_MINUTE = 60
FIVE_MINUTES = ONE_MINUTE * 5
ONE_HOUR = ONE_MINUTE * 60
# Timeout for a single Powers of Tau download
POT_DOWNLOAD_TIMEOUT_SECONDS = FIVE_MINUTES * 2
# Timeout for the ceremony registration request
REGISTRATION_TIMEOUT_SECONDS = ONE_MINUTE
# Chunk size used when streaming downloads to disk
DOWNLOAD_CHUNK_SIZE = 8192
