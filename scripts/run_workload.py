#!/usr/bin/env python3
"""
Workload driver for the record adapter.

Loads a number of records, then runs a mixed read/update workload from
several worker threads, one StoreDB per thread.

Metrics:
- Operations per second
- Latency (p50, p95, p99)
- Error count

Usage:
    STORE_BACKEND=embedded python scripts/run_workload.py --records 1000 --ops 10000
    STORE_BACKEND=http STORE_PORT=9090 python scripts/run_workload.py
"""

import argparse
import logging
import random
import statistics
import string
import threading
import time
from typing import List

from recordkv.adapter.config import AdapterConfig
from recordkv.adapter.db import StoreDB, open_store
from recordkv.base.status import Status
from recordkv.core.fields import DEFAULT_FIELDS

TABLE = "usertable"


def random_value(size: int) -> str:
    return "".join(random.choices(string.ascii_letters + string.digits, k=size))


def record_key(i: int) -> str:
    return f"user{i}"


def new_record(field_length: int):
    return {field: random_value(field_length) for field in DEFAULT_FIELDS}


def percentile(samples: List[float], p: float) -> float:
    if not samples:
        return 0.0
    ordered = sorted(samples)
    idx = min(len(ordered) - 1, int(len(ordered) * p))
    return ordered[idx]


class Worker(threading.Thread):
    def __init__(self, db: StoreDB, ops: int, records: int, read_ratio: float, field_length: int):
        super().__init__(daemon=True)
        self.db = db
        self.ops = ops
        self.records = records
        self.read_ratio = read_ratio
        self.field_length = field_length
        self.latencies: List[float] = []
        self.errors = 0

    def run(self):
        for _ in range(self.ops):
            key = record_key(random.randrange(self.records))
            start = time.perf_counter()
            if random.random() < self.read_ratio:
                status, _ = self.db.read(TABLE, key)
            else:
                field = random.choice(DEFAULT_FIELDS)
                status = self.db.update(TABLE, key, {field: random_value(self.field_length)})
            self.latencies.append(time.perf_counter() - start)
            if status is not Status.OK:
                self.errors += 1


def main():
    parser = argparse.ArgumentParser(description="Run a mixed workload against the record adapter")
    parser.add_argument("--records", type=int, default=1000)
    parser.add_argument("--ops", type=int, default=10000, help="operations per worker")
    parser.add_argument("--threads", type=int, default=4)
    parser.add_argument("--read-ratio", type=float, default=0.5)
    parser.add_argument("--field-length", type=int, default=100)
    args = parser.parse_args()

    config = AdapterConfig()
    logging.basicConfig(
        level=config.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Embedded stores live in this process, so all workers share one.
    shared = open_store(config) if config.store_backend.lower() == "embedded" else None

    loader = StoreDB(store=shared) if shared else StoreDB()
    loader.init()
    load_start = time.perf_counter()
    for i in range(args.records):
        if loader.insert(TABLE, record_key(i), new_record(args.field_length)) is not Status.OK:
            print(f"load failed at {record_key(i)}")
            break
    print(f"Loaded {args.records} records in {time.perf_counter() - load_start:.2f}s")

    workers = []
    for _ in range(args.threads):
        db = StoreDB(store=shared) if shared else StoreDB()
        db.init()
        workers.append(Worker(db, args.ops, args.records, args.read_ratio, args.field_length))

    run_start = time.perf_counter()
    for w in workers:
        w.start()
    for w in workers:
        w.join()
    elapsed = time.perf_counter() - run_start

    latencies = [lat for w in workers for lat in w.latencies]
    errors = sum(w.errors for w in workers)
    total = len(latencies)
    print(f"Operations: {total}  Errors: {errors}  Elapsed: {elapsed:.2f}s")
    print(f"Throughput: {total / elapsed:.0f} ops/sec")
    if latencies:
        print(
            f"Latency ms: mean={statistics.mean(latencies) * 1000:.3f} "
            f"p50={percentile(latencies, 0.50) * 1000:.3f} "
            f"p95={percentile(latencies, 0.95) * 1000:.3f} "
            f"p99={percentile(latencies, 0.99) * 1000:.3f}"
        )

    # a shared embedded store saves on its first close; later closes are no-ops
    for w in workers:
        w.db.cleanup()
    loader.cleanup()


if __name__ == "__main__":
    main()
