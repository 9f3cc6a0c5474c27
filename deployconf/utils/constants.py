import time

WORK_DIR = ".deployconf"
START_TIME = time.time()
START_TIME_INT = int(START_TIME)
LOGS_PATH = f"{WORK_DIR}/{START_TIME_INT}/logs.txt"
DEFAULT_CONFIG_PATH = "deployconf.yaml"

LOCAL_TARGET_NAME = "hardhat"
LOCAL_RPC_URL = "http://127.0.0.1:8545"

NETWORK_DEFAULT_FEE = "network-default"
# Hardhat spelling of the network-decided gas price
HARDHAT_AUTO_GAS_PRICE = "auto"

DEFAULT_COMPILER_VERSION = "0.8.19"
DEFAULT_OPTIMIZER_RUNS = 200
DEFAULT_REPORT_CURRENCY = "USD"

# Upper bound for a signing key: secp256k1 private keys are 32 bytes
MAX_CREDENTIAL_BYTES = 32

TRUTHY_FLAGS = {"1", "true", "yes", "on"}
FALSY_FLAGS = {"", "0", "false", "no", "off"}
