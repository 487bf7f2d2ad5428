"""Project scaffolding: templates, sub-generators and the orchestrator."""

from shivam.scaffolder.cron_gen import CronGenerator
from shivam.scaffolder.docker_gen import DockerGenerator
from shivam.scaffolder.generator import ProjectGenerator, ScaffoldError
from shivam.scaffolder.manifest_gen import ManifestGenerator
from shivam.scaffolder.templates import TemplateRenderer

__all__ = [
    "CronGenerator",
    "DockerGenerator",
    "ManifestGenerator",
    "ProjectGenerator",
    "ScaffoldError",
    "TemplateRenderer",
]
