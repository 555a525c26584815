import os

from pydantic import BaseModel


class Settings(BaseModel):
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # JVM used to host the worker process
    JAVA_EXECUTABLE: str = os.getenv("JAVA_EXECUTABLE", "java")
    # Pin the platform version instead of probing `java -version`
    JAVA_VERSION: str | None = os.getenv("JAVA_VERSION")

    # FindBugs entry point inside the tool classpath
    FINDBUGS_MAIN_CLASS: str = os.getenv("FINDBUGS_MAIN_CLASS", "edu.umd.cs.findbugs.FindBugs2")

    # Worker lifecycle (0 = no timeout)
    WORKER_TIMEOUT_SEC: int = int(os.getenv("WORKER_TIMEOUT_SEC", "0"))
    WORKER_KILL_GRACE_SEC: int = int(os.getenv("WORKER_KILL_GRACE_SEC", "10"))


settings = Settings()
