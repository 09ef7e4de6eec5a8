"""
Cleanup of both deployments.

Teardown always covers the development and the production compose files,
whatever mode the invocation selected. ``clean-all`` then removes the
project images and prunes the engine through the Docker SDK.
"""

import logging
from typing import Callable, Dict, List

import docker
from rich.console import Console

from ecom_orcha.core.runner import CommandRunner
from ecom_orcha.models.settings import OrchestratorSettings


logger = logging.getLogger('ecom_orchestrator.cleanup')


class CleanupManager:
    """
    Tears down every deployment and reclaims engine resources.
    """
    def __init__(self, settings: OrchestratorSettings, runner: CommandRunner, console: Console = None,
                 client_factory: Callable[[], docker.DockerClient] = docker.from_env):
        self.settings = settings
        self.runner = runner
        self.console = console or runner.console
        self.client_factory = client_factory

    def teardown(self, volumes: bool = False) -> int:
        """
        Run ``docker compose down`` for both compose files.

        Args:
            volumes: Also remove named volumes

        Returns:
            int: 0, or the exit code of the first failing teardown
        """
        for compose_file in self.settings.compose_files():
            command = ["docker", "compose", "-f", compose_file, "down"]
            if volumes:
                command.append("-v")
            returncode = self.runner.run(command)
            if returncode != 0:
                logger.error(f"Teardown of {compose_file} failed with exit code {returncode}")
                return returncode
        return 0

    def clean(self) -> int:
        returncode = self.teardown()
        if returncode == 0:
            self.console.print("[bold green]Containers and networks removed[/]")
        return returncode

    def clean_volumes(self) -> int:
        returncode = self.teardown(volumes=True)
        if returncode == 0:
            self.console.print("[bold green]Volumes removed[/]")
        return returncode

    def remove_images(self, client: docker.DockerClient) -> List[str]:
        """
        Force-remove the project images, ignoring individual failures.

        Returns:
            List[str]: Names of the images actually removed
        """
        removed = []
        for image in self.settings.images:
            try:
                client.images.remove(image=image, force=True)
                removed.append(image)
            except docker.errors.ImageNotFound:
                logger.debug(f"Image {image} not present")
            except docker.errors.APIError as e:
                logger.warning(f"Failed to remove image {image}: {str(e)}")
        return removed

    def prune(self, client: docker.DockerClient) -> Dict[str, int]:
        """Prune stopped containers, unused networks, dangling images and build cache."""
        results = {
            'containers': client.containers.prune(),
            'networks': client.networks.prune(),
            'images': client.images.prune(filters={'dangling': True}),
            'build_cache': client.api.prune_builds(),
        }
        reclaimed = 0
        for result in results.values():
            if isinstance(result, dict):
                reclaimed += result.get('SpaceReclaimed') or 0
        logger.info(f"Pruned engine resources, reclaimed {reclaimed} bytes")
        return {'reclaimed': reclaimed}

    def clean_all(self) -> int:
        """
        Remove containers, volumes, project images and dangling resources.

        Returns:
            int: 0 on success, the teardown exit code, or 1 when pruning failed
        """
        returncode = self.clean_volumes()
        if returncode != 0:
            return returncode

        try:
            client = self.client_factory()
        except docker.errors.DockerException as e:
            logger.error(f"Cannot connect to the Docker engine: {str(e)}")
            self.console.print(f"[bold red]✗[/] Cannot connect to the Docker engine: {str(e)}")
            return 1

        try:
            removed = self.remove_images(client)
            if removed:
                self.console.print(f"Removed images: {', '.join(removed)}")
            try:
                self.prune(client)
            except docker.errors.APIError as e:
                logger.error(f"Prune failed: {str(e)}")
                self.console.print(f"[bold red]✗[/] Prune failed: {str(e)}")
                return 1
        finally:
            client.close()

        self.console.print("[bold green]Everything cleaned (containers, volumes, images, networks)[/]")
        return 0
