import argparse, json, random, socket, threading, time

def obs_st(serial, hub_sn, now):
    return {
        "serial_number": serial,
        "type": "obs_st",
        "hub_sn": hub_sn,
        "obs": [[
            now,
            round(random.uniform(0.0, 2.0), 2),    # wind lull
            round(random.uniform(1.0, 5.0), 2),    # wind avg
            round(random.uniform(4.0, 12.0), 2),   # wind gust
            random.randint(0, 359),
            3,
            round(random.uniform(990.0, 1030.0), 2),
            round(random.uniform(-5.0, 35.0), 2),
            round(random.uniform(20.0, 95.0), 1),
            random.randint(0, 100000),
            round(random.uniform(0.0, 11.0), 2),
            random.randint(0, 1000),
            round(random.choice([0.0, 0.0, 0.0, random.uniform(0.0, 3.0)]), 3),
            0,
            random.randint(0, 40),
            random.randint(0, 3),
            round(random.uniform(2.4, 2.8), 3),
            1,
        ]],
        "firmware_revision": 129,
    }

def rapid_wind(serial, hub_sn, now):
    return {
        "serial_number": serial,
        "type": "rapid_wind",
        "hub_sn": hub_sn,
        "ob": [now, round(random.uniform(0.0, 8.0), 2), random.randint(0, 359)],
    }

def device_status(serial, hub_sn, now):
    return {
        "serial_number": serial,
        "type": "device_status",
        "hub_sn": hub_sn,
        "timestamp": now,
        "uptime": 2189,
        "voltage": round(random.uniform(2.4, 2.8), 3),
        "firmware_revision": 17,
        "rssi": random.randint(-90, -40),
        "hub_rssi": random.randint(-90, -40),
        "sensor_status": 0,
        "debug": 0,
    }

def hub_status(hub_sn, now):
    return {
        "serial_number": hub_sn,
        "type": "hub_status",
        "firmware_revision": "35",
        "uptime": 1670133,
        "rssi": random.randint(-80, -40),
        "timestamp": now,
        "reset_flags": "BOR,PIN,POR",
        "seq": 48,
        "fs": [1, 0, 15675411, 524288],
        "radio_stats": [2, 1, 0, 3, 2839],
        "mqtt_stats": [1, 0],
    }

def one_device(serial, hub_sn, target, rps):
    interval = 1.0 / rps
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    tick = 0
    while True:
        now = int(time.time())
        payloads = [rapid_wind(serial, hub_sn, now)]
        # observations and status reports are sent far less often than rapid wind
        if tick % 20 == 0:
            payloads += [obs_st(serial, hub_sn, now), device_status(serial, hub_sn, now), hub_status(hub_sn, now)]
        for payload in payloads:
            try:
                sock.sendto(json.dumps(payload).encode("utf-8"), target)
            except OSError as e:
                print(f"send failed: {e}")
        tick += 1
        time.sleep(interval)

if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--devices", type=int, default=1)
    p.add_argument("--rps", type=float, default=1.0, help="per-device rapid_wind packets/sec")
    p.add_argument("--host", default="255.255.255.255")
    p.add_argument("--port", type=int, default=50222)
    args = p.parse_args()

    print(f"Starting {args.devices} simulated Tempest devices at {args.rps} rps to {args.host}:{args.port}")
    threads = []
    for i in range(args.devices):
        t = threading.Thread(target=one_device, args=(f"ST-{i+1:08d}", "HB-00000001", (args.host, args.port), args.rps), daemon=True)
        t.start()
        threads.append(t)
    for t in threads:
        t.join()
