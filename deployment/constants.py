from pathlib import Path

from web3 import Web3

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
APE_CONFIG_FILEPATH = PROJECT_ROOT / "ape-config.yaml"

#
# Environment
#

RPC_URL_ENVVAR = "RPC_URL"
PRIVATE_KEY_ENVVAR = "PRIVATE_KEY"
ETHERSCAN_API_KEY_ENVVAR = "ETHERSCAN_API_KEY"
DEPLOYER_PASSPHRASE_ENVVAR = "DEPLOYER_PASSPHRASE"

DEPLOYER_ACCOUNT_ALIAS = "laxce-deployer"

#
# Networks
#

LOCAL = "local"
MAINNET = "mainnet"
HOLESKY = "holesky"
TESTNET = "testnet"
MATIC = "matic"

SUPPORTED_NETWORKS = [LOCAL, MAINNET, HOLESKY, TESTNET, MATIC]
LIVE_NETWORKS = [MAINNET, HOLESKY, TESTNET, MATIC]
DEFAULT_NETWORK = MAINNET

LOCAL_NETWORK_CHOICE = "ethereum:local:test"
MATIC_MUMBAI_RPC_URL = "https://matic-mumbai.chainstacklabs.com/"

#
# Contracts
#

LAXCE_TOKEN = "Laxce"
LAXCE_CROWDSALE = "LaxceCrowdSale"

INITIALIZER = "initialize"

UUPS = "uups"
TRANSPARENT = "transparent"
SUPPORTED_PROXY_KINDS = [UUPS, TRANSPARENT]

OZ_DEPENDENCY_NAME = "openzeppelin"
OZ_DEPENDENCY_VERSION = "5.0.0"

CROWDSALE_RATE = "40000"
USDT_ADDRESS = "0xdAC17F958D2ee523a2206206994597C13D831ec7"

#
# Gas (legacy matic network)
#

MATIC_GAS_LIMIT = 2_100_000
MATIC_GAS_PRICE = Web3.to_wei(8, "gwei")
