#!/usr/bin/env python3
"""
HD Key Derivation Tool
======================
Derives Ethereum keys and addresses from a BIP39 mnemonic along BIP44 paths.

Architecture:
  Phase 1: Seed (CPU, <1s): mnemonic + passphrase → 64-byte BIP39 seed
  Phase 2: Account node: master key → m/44'/60'/account'/change
  Phase 3: Address derivation (CPU, parallel): one child per index

Output is one JSON object per derived index on stdout.

Usage:
    Set environment variables and run, or use the ``hd-keygen`` entry point.
"""

import json
import multiprocessing as mp
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, List, Tuple

from hd_keygen.errors import HDKeygenError
from hd_keygen.hd_key import (
    HARDENED_OFFSET,
    HDKey,
    bip44_path,
    format_index,
    parse_derivation_path,
)
from hd_keygen.mnemonic_seed import create_mnemonic, to_seed, validate_mnemonic

# ============================================================
# Configuration (all overridable via environment variables)
# ============================================================
NUM_WORKERS = int(os.getenv("NUM_WORKERS", "") or mp.cpu_count())
MNEMONIC = os.getenv("MNEMONIC", "")
PASSPHRASE = os.getenv("BIP39_PASSPHRASE", "")  # optional BIP39 passphrase
GENERATE = os.getenv("GENERATE", "false").lower() == "true"
ACCOUNT = int(os.getenv("ACCOUNT", "0"))
CHANGE = int(os.getenv("CHANGE", "0"))
ADDRESSES_PER_PATH = int(os.getenv("ADDRESSES_PER_PATH", "5"))
START_INDEX = int(os.getenv("START_INDEX", "0"))
DERIVATION_PATH = os.getenv("DERIVATION_PATH", "")  # overrides ACCOUNT/CHANGE
SHOW_PRIVATE_KEYS = os.getenv("SHOW_PRIVATE_KEYS", "false").lower() == "true"


def base_path(account: int, change: int, override: str = "") -> str:
    """The parent path that per-index children are derived under."""
    if override:
        return override.rstrip("/")
    # bip44_path ends with "/index"; drop it to get the change level.
    return bip44_path(account=account, change=change).rsplit("/", 1)[0]


def _worker_derive_batch(args: Tuple[HDKey, List[int], bool]) -> List[Tuple[int, Dict]]:
    """Worker: derive one child per index below the parent node."""
    parent, indices, include_private = args
    results = []
    for i in indices:
        try:
            child = parent.derive_child(i)
        except HDKeygenError as e:
            # BIP32: an invalid child is skipped by the caller.
            results.append((i, {"path": f"{parent.path}/{format_index(i)}", "error": str(e)}))
            continue
        results.append((i, child.to_dict(include_private=include_private)))
    return results


def derive_addresses(
    parent: HDKey,
    start: int,
    count: int,
    num_workers: int,
    include_private: bool = False,
) -> List[Dict]:
    """
    Derive ``count`` consecutive children of ``parent`` in parallel.
    Returns the per-index records ordered by index.
    """
    indices = list(range(start, start + count))
    if not indices:
        return []

    batch_size = max(1, len(indices) // (num_workers * 4))
    batches = []
    for i in range(0, len(indices), batch_size):
        batches.append((parent, indices[i : i + batch_size], include_private))

    all_results = []
    with ProcessPoolExecutor(max_workers=num_workers) as executor:
        futures = [executor.submit(_worker_derive_batch, b) for b in batches]
        for fut in as_completed(futures):
            all_results.extend(fut.result())

    all_results.sort(key=lambda x: x[0])
    return [record for _, record in all_results]


def print_banner(path: str, num_workers: int, start: int, count: int):
    print("=" * 65)
    print("  HD KEY DERIVATION TOOL")
    print("=" * 65)
    print(f"  Base path:          {path}")
    print(f"  Indices:            {start}..{start + count - 1}")
    print(f"  Workers (CPU):      {num_workers}")
    print(f"  Private keys:       {'SHOWN' if SHOW_PRIVATE_KEYS else 'hidden'}")
    if PASSPHRASE:
        print(f"  BIP39 passphrase:   (set)")
    print("=" * 65)


# ============================================================
# Main
# ============================================================
def main():
    # --- Parse inputs ---
    mnemonic_str = " ".join(MNEMONIC.strip().lower().split())
    if not mnemonic_str:
        if not GENERATE:
            print("\nERROR: MNEMONIC environment variable not set.")
            print("Set it to your space-separated words, or set GENERATE=true.")
            sys.exit(1)
        mnemonic_str = create_mnemonic(32)
        print(f"\n  Generated mnemonic:  {mnemonic_str}")
        print("  Write it down and keep it offline.")
    elif not validate_mnemonic(mnemonic_str):
        print("\nERROR: MNEMONIC is not a valid BIP39 English phrase (word or checksum).")
        sys.exit(1)

    if ADDRESSES_PER_PATH < 1 or START_INDEX < 0:
        print("\nERROR: ADDRESSES_PER_PATH must be >= 1 and START_INDEX >= 0.")
        sys.exit(1)
    # Per-index children are non-hardened, so every index must stay below 2^31.
    if START_INDEX + ADDRESSES_PER_PATH > HARDENED_OFFSET:
        print(
            f"\nERROR: Indices {START_INDEX}..{START_INDEX + ADDRESSES_PER_PATH - 1} "
            f"exceed the non-hardened range (max {HARDENED_OFFSET - 1})."
        )
        sys.exit(1)

    path = base_path(ACCOUNT, CHANGE, DERIVATION_PATH)
    try:
        parse_derivation_path(path)
    except HDKeygenError as e:
        print(f"\nERROR: Invalid derivation path {path!r}: {e}")
        sys.exit(1)

    print_banner(path, NUM_WORKERS, START_INDEX, ADDRESSES_PER_PATH)

    # ==== Phase 1: Seed ====
    t0 = time.time()
    seed = to_seed(mnemonic_str, PASSPHRASE)
    print(f"\n[PHASE 1] ✓ Seed computed ({len(seed)} bytes)", flush=True)

    # ==== Phase 2: Account node ====
    try:
        parent = HDKey.from_seed(seed).derive_path(path)
    except HDKeygenError as e:
        print(f"\nERROR: Derivation of {path} failed: {e}")
        sys.exit(1)
    print(f"[PHASE 2] ✓ Derived {path}", flush=True)

    # ==== Phase 3: Per-index children ====
    print(f"[PHASE 3] Deriving {ADDRESSES_PER_PATH} addresses...", flush=True)
    records = derive_addresses(
        parent, START_INDEX, ADDRESSES_PER_PATH, NUM_WORKERS, SHOW_PRIVATE_KEYS,
    )
    for record in records:
        print(json.dumps(record), flush=True)

    # ==== Summary ====
    failed = sum(1 for r in records if "error" in r)
    total_time = time.time() - t0
    print(f"\n{'=' * 65}")
    print(f"  Derived:    {len(records) - failed}")
    if failed:
        print(f"  Skipped:    {failed} (invalid child keys)")
    print(f"  Total time: {total_time:.2f}s")
    print(f"{'=' * 65}")


if __name__ == "__main__":
    main()
