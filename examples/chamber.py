import asyncio
import logging
import random

import heatctl

SENSORS = ('temperature:100', 'temperature:101')
AMBIENT = 15.0

class Chamber(heatctl.MemoryRelay):
    """Fake heated chamber: the relay drives a simple thermal model."""

    def __init__(self):
        super().__init__()
        self.temp = AMBIENT

    def step(self, dt):
        heating = 4.0 if self.get_relay_state() else 0.0
        self.temp += dt * (heating - 0.15 * (self.temp - AMBIENT))

    def read_sensor(self, sensor_id):
        if random.random() < 0.05:
            return None     # occasional bad reading
        return round(self.temp + random.uniform(-0.2, 0.2), 2)

async def physics(chamber):
    while True:
        await asyncio.sleep(0.1)
        chamber.step(0.1)

async def remote(control):
    for threshold in ("22", "25", "0"):
        print(f"remote: threshold {threshold} °C")
        control.on_message(control.config.topic, threshold)
        await asyncio.sleep(8)

async def report(chamber):
    while True:
        print(f" T={chamber.temp:.1f} heater {'ON' if chamber.get_relay_state() else 'off'}")
        await asyncio.sleep(1)

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    chamber = Chamber()
    config = heatctl.ControlConfig(sensor_ids=SENSORS, timer_interval='0.5s')
    control = heatctl.ControlLoop(config, chamber, chamber.read_sensor)
    print('Press ctrl-C to stop\n')
    asyncio.run(heatctl.run(control, remote(control), physics(chamber), report(chamber)))
