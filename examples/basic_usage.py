#!/usr/bin/env python3
"""Basic usage example for tcodewave.

This example demonstrates:
1. Configuring a pipeline for the debug device
2. Connecting and starting transmission
3. Changing the waveform while running
4. Reading the debug log
"""

from __future__ import annotations

import asyncio

from tcodewave import Pipeline, PipelineSettings


async def run_example() -> None:
    settings = PipelineSettings(
        device_kind="debug",
        send_frequency=20,
        base_period=250,
        random_max=50,
    )

    async with Pipeline(settings) as pipeline:
        # Connect to the debug device
        print("1. Connecting to the debug device...")
        await pipeline.connect()
        print(f"   Connected: {pipeline.is_connected}")
        print()

        # Start transmission
        print("2. Transmitting a full-stroke wave for 1 second...")
        pipeline.set_running(True)
        await asyncio.sleep(1.0)
        print()

        # Narrow the stroke; the waveform restarts from phase zero
        print("3. Narrowing the stroke to 40-60%...")
        pipeline.update_settings(amplitude_min=0.4, amplitude_max=0.6)
        await asyncio.sleep(1.0)
        print()

    # Read back what the device received
    print("4. Debug log:")
    for record in pipeline.debug_logs:
        print(f"   {record}")
    print()


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("tcodewave Basic Usage Example")
    print("=" * 60)
    print()

    asyncio.run(run_example())

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
