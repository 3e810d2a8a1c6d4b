"""
BullMQ Throughput Benchmark

A benchmarking harness that measures how fast the BullMQ job queue adds,
bulk-adds, processes and links jobs on a Redis store, and reports
jobs-per-second for the Python runtime it runs on.
"""

__version__ = "1.0.0"
