"""
Publish directories and raw files against a local API
"""
import asyncio
import os
from pandopub import Publisher, PublisherConfig, ArchiverConfig, derive_publishing_key, content_address


async def main():
    secret = os.environ["PANDO_SECRET"]
    
    # Where will "site" live? The address only depends on the name.
    print(content_address(derive_publishing_key(secret, "site")))
    
    config = PublisherConfig.for_endpoint(
        "http://127.0.0.1:8787",
        archiver=ArchiverConfig(command=("npx", "ipfs-car"))
    )
    
    async with Publisher(config) as publisher:
        # Nest the tree under one top-level directory node
        wrapped = await publisher.run(secret, "public/site", mode="wrap")
        print(wrapped[0].to_dict())
        
        # Raw images, first three only
        images = await publisher.run(secret, "public/img/*.png", mode="file", limit=3)
        for result in images:
            print(result.to_dict())


if __name__ == "__main__":
    asyncio.run(main())
