"""
configseal: Basic Usage Example

Demonstrates reading an encrypted value out of ordinary configuration.
app.encrypted is stored as HCENC(...) and comes back as plaintext; the code
reading it never knows it was encrypted.
"""

import os
import shutil
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from configseal import (
    DictSource,
    LayeredConfig,
    Settings,
    build_envelope,
    enable_config_decryption,
)


def main():
    # A key directory with one token and one AES-256 key
    key_dir = Path("./example-keys")
    (key_dir / "CONFIGSEAL").mkdir(parents=True, exist_ok=True)
    (key_dir / "CONFIGSEAL" / "ConfigSealKey.key").write_text(os.urandom(32).hex())

    settings = Settings.from_mapping({
        "CONFIGSEAL_ENABLED": "true",
        "CONFIGSEAL_TOKEN_LABEL": "CONFIGSEAL",
        "CONFIGSEAL_KEY_DIR": str(key_dir),
    })

    print("=" * 50)
    print("  configseal: Encrypted Config Values")
    print("=" * 50)

    # What an operator would do with: configseal enc "my-db-password"
    wrapped = build_envelope(settings).encrypt_and_wrap("my-db-password")
    print(f"\nStored in config: app.encrypted = {wrapped}")

    config = LayeredConfig([
        DictSource("environment", {"app": {"plain": "my-db-password"}}),
        DictSource("application", {"app": {"encrypted": wrapped, "port": 8080}}),
    ])
    enable_config_decryption(config, settings)

    plain = config.get("app.plain")
    encrypted = config.get("app.encrypted")
    print(f"\napp.plain     = {plain}")
    print(f"app.encrypted = {encrypted}")
    print(f"app.port      = {config.get('app.port')}")
    print(f"Match         = {'YES' if plain == encrypted else 'NO'}")

    # Cleanup
    shutil.rmtree(key_dir, ignore_errors=True)
    print("\nCleaned up example files.")


if __name__ == "__main__":
    main()
