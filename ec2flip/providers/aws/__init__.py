"""AWS provider: EC2 instance control and SSM agent checks."""

from ec2flip.providers.aws.compute import EC2Manager
from ec2flip.providers.aws.ssm import SSMManager

__all__ = ["EC2Manager", "SSMManager"]
