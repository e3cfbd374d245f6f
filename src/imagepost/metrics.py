from prometheus_client import Counter

post_create_total = Counter(
    "imagepost_post_create_total",
    "Number of posts stored successfully"
)

post_create_failures_total = Counter(
    "imagepost_post_create_failures_total",
    "Number of failed post creations",
    ["reason"]
)

storage_writes_total = Counter(
    "imagepost_storage_writes_total",
    "Number of object storage writes",
    ["outcome"]
)
