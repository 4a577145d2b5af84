"""HTTP gateway that publishes caller-supplied messages to a Kafka topic."""

__version__ = "0.1.0"
