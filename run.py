import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    # Single worker: the catalog cache and the Supabase client are
    # per-process singletons, so extra workers would each hold their own copy
    # and admin invalidations would only reach one of them.
    workers = int(os.environ.get("WEB_CONCURRENCY", 1))
    uvicorn.run(
        "wrenchmark.main:app",
        host="0.0.0.0",
        port=port,
        workers=workers,
    )
