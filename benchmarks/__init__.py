"""
Benchmark suite for bytejson parsing and writing performance.

Compares bytejson against common JSON libraries:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures parse and write speed, the cost of small refill windows, and peak
memory when reading from a stream.
"""
