"""
Publish JSON documents as DAG archives
"""
import asyncio
import os
from pandopub import Publisher, setup_logging


async def main():
    setup_logging()
    secret = os.environ["PANDO_SECRET"]
    
    async with Publisher() as publisher:
        results = await publisher.run(secret, "metadata/*.json", published=True)
        
        for result in results:
            if result.ok:
                print(f"{result.human_name}: {result.content_address} -> {result.response}")
            else:
                print(f"{result.path} failed: {result.error}")


if __name__ == "__main__":
    asyncio.run(main())
