from prometheus_client import Counter, Histogram

# Fetch
prompt_fetch_total = Counter("prompthub_fetch_total", "Prompt fetches", ["source", "outcome"])  # source=remote|cache|local
prompt_fetch_latency_ms = Histogram("prompthub_fetch_latency_ms", "Remote prompt fetch latency (ms)")

# Cache
prompt_cache_hit = Counter("prompthub_cache_hit_total", "Prompt cache hits")
prompt_cache_miss = Counter("prompthub_cache_miss_total", "Prompt cache misses")

# Compile
prompt_compile_errors = Counter("prompthub_compile_errors_total", "Prompt compile failures", ["reason"])
