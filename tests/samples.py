"""Sample control-plane payloads shared by the tests."""

CONTAINERS = [
    {
        "id": "a1b2c3d4e5f60718293a4b5c",
        "names": ["/web"],
        "image": "nginx:latest",
        "status": "running",
        "ports": [{"publicPort": 8080, "privatePort": 80, "type": "tcp"}],
        "mounts": [{"source": "web-data", "destination": "/usr/share/nginx/html"}],
        "created": 1700000300,
    },
    {
        "id": "b2c3d4e5f6071829ab12cdef",
        "names": ["/db"],
        "image": "postgres:16",
        "status": "exited",
        "ports": [],
        "mounts": [{"source": "pg-data", "destination": "/var/lib/postgresql/data"}],
        "created": 1700000100,
    },
    {
        "id": "c3d4e5f60718293a4b5c6d7e",
        "names": ["/cache"],
        "image": "redis:7",
        "status": "paused",
        "ports": [{"publicPort": 6379, "privatePort": 6379}],
        "mounts": [],
        "created": 1700000200,
    },
]

IMAGES = [
    {"id": "sha256:1111aaaa2222bbbb3333", "repository": "nginx", "tag": "latest", "size": 1000},
    {"id": "sha256:4444cccc5555dddd6666", "repository": "postgres", "tag": "16", "size": 4000},
    {"id": "sha256:7777eeee8888ffff9999", "repository": "<none>", "tag": "<none>", "size": 500},
]

VOLUMES = [
    {
        "name": "web-data",
        "driver": "local",
        "mountPoint": "/var/lib/docker/volumes/web-data/_data",
        "usageData": {"size": 2048, "refCount": 1},
    },
    {"name": "orphan", "driver": "local", "usageData": {"size": 100, "refCount": 0}},
    {"name": "f" * 64, "driver": "local", "usageData": {"size": 50, "refCount": 0}},
]

SYSTEM_INFO = {
    "version": "24.0.7",
    "containers": 3,
    "containersRunning": 1,
    "containersPaused": 1,
    "containersStopped": 1,
    "images": 3,
    "memTotal": 8589934592,
    "ncpu": 4,
    "architecture": "x86_64",
    "operatingSystem": "Ubuntu 22.04",
    "kernelVersion": "6.1.0",
}
