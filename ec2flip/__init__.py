"""ec2flip - start or stop an EC2 instance and wait for it to settle."""

__version__ = "0.3.0"
