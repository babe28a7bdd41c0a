# SPDX-License-Identifier: BSD-3-Clause
"""
Command dispatch for kernel and busybox trees.

One cook class per target kind maps each Operation to a phase. Exactly
one phase runs per invocation; every external step goes through the
injected runner so tests can spy on it.
"""

import shutil
import subprocess

from cook.build.capability import CapabilitySet, probe_capabilities
from cook.build.disk import (DEFAULT_FILESYSTEM, DEFAULT_IMAGE, DEFAULT_MOUNT_DIR,
                             DEFAULT_SIZE_MB, FilesystemImage, PackagingSpec)
from cook.build.environment import MANAGED_VARIABLES, EnvironmentProfile
from cook.build.errors import PhaseFailure, UnrecognizedOperation
from cook.build.request import BuildRequest, Operation, TargetKind
from cook.build.runner import run_command
from cook.build.timer import PhaseResult, PhaseTimer

OUT_DIR = 'out'
STAGING_DIR = '_install'

# Skeleton directories added to the staging tree after install
ROOTFS_DIRS = ('proc', 'dev', 'sys', 'boot', 'tmp')


# =============================================================================
# Base Class
# =============================================================================

class Cook:
    """Runs phases against one validated target tree."""

    kind = None

    def __init__(self, request: BuildRequest, profile: EnvironmentProfile,
                 runner=run_command, capabilities: CapabilitySet = None,
                 enable_depgraph: bool = False):
        """
        Args:
            request: Validated build request
            profile: Resolved build environment
            runner: Callable with run_command's signature
            capabilities: Pre-probed indexers, probed on demand when None
            enable_depgraph: Allow cscope when probing on demand
        """
        self.request = request
        self.profile = profile
        self.runner = runner
        self.capabilities = capabilities
        self.enable_depgraph = enable_depgraph

        self.root = request.target_path

    def handlers(self) -> dict:
        raise NotImplementedError

    def run(self) -> PhaseResult:
        """Run the request's operation. Returns None for untimed phases."""
        handler = self.handlers().get(self.request.operation)
        if handler is None:
            raise UnrecognizedOperation(self.request.operation.value,
                                        self.kind.value)
        return handler()

    def make(self, phase: str, *targets, parallel: bool = True):
        """Invoke make in the target root with the resolved environment."""
        cmd = ['make']
        if parallel:
            cmd.append(f'-j{self.request.jobs}')
        cmd.extend(targets)

        try:
            self.runner(cmd, env=self.profile.build_env(), cwd=self.root,
                        unset=MANAGED_VARIABLES)
        except subprocess.CalledProcessError as e:
            raise PhaseFailure(phase, e.returncode) from e

    def reset_config(self) -> PhaseResult:
        """Remove all prior configuration (not build output)."""
        with PhaseTimer('mrproper') as result:
            self.make('mrproper', 'mrproper', parallel=False)
        return result

    def index_targets(self) -> list:
        if self.capabilities is None:
            self.capabilities = probe_capabilities(
                enable_depgraph=self.enable_depgraph)
        return self.capabilities.make_targets()

    def generate_index(self) -> PhaseResult:
        """Generate source indexes with whichever indexers are installed."""
        with PhaseTimer('tags', 'generating tags') as result:
            targets = self.index_targets()
            if targets:
                self.make('tags', *targets)
            else:
                print("[cook] No source indexers available, skipping")
        return result


# =============================================================================
# Kernel
# =============================================================================

class KernelCook(Cook):
    """Kernel tree phases. Build output lives under out/."""

    kind = TargetKind.KERNEL

    @property
    def out_dir(self):
        return self.root / OUT_DIR

    def handlers(self) -> dict:
        return {
            Operation.BUILD: self.build,
            Operation.CLEAN: self.clean,
            Operation.CLEAN_ALL: self.clean_all,
            Operation.CONFIG: self.config,
            Operation.RESET_CONFIG: self.reset_config,
            Operation.GENERATE_INDEX: self.generate_index,
        }

    def make_args(self) -> list:
        """Arguments directing kbuild output into out/."""
        return [f'O={OUT_DIR}/']

    def build(self) -> PhaseResult:
        with PhaseTimer('build', 'compiling kernel') as result:
            self.make('build', *self.make_args())
        return result

    def clean(self) -> PhaseResult:
        """Remove built objects under out/, keeping out/ itself."""
        with PhaseTimer('clean', 'cleaning') as result:
            self.make('clean', 'clean', *self.make_args())
        return result

    def clean_all(self) -> PhaseResult:
        """Remove the whole out/ tree, configuration included."""
        with PhaseTimer('cleanall', f'removing {OUT_DIR}/') as result:
            if self.out_dir.exists():
                shutil.rmtree(self.out_dir)
                print(f"Removed: {self.out_dir}")
        return result

    def config(self):
        """Run menuconfig, then move the resulting .config into out/."""
        self.make('config', 'menuconfig', parallel=False)

        config_file = self.root / '.config'
        if not config_file.is_file():
            raise PhaseFailure('config', 1, "menuconfig produced no .config")

        self.out_dir.mkdir(exist_ok=True)
        config_file.replace(self.out_dir / '.config')
        print(f"[cook] Configuration saved to {self.out_dir / '.config'}")


# =============================================================================
# Busybox
# =============================================================================

class BusyboxCook(Cook):
    """Busybox tree phases, including root filesystem packaging."""

    kind = TargetKind.BUSYBOX

    def __init__(self, request: BuildRequest, profile: EnvironmentProfile,
                 image: str = DEFAULT_IMAGE, size_mb: int = DEFAULT_SIZE_MB,
                 mount_dir: str = DEFAULT_MOUNT_DIR, use_sudo: bool = None,
                 filesystem: str = DEFAULT_FILESYSTEM, **kwargs):
        """
        Args:
            image: Image file name, relative to the target root
            size_mb: Image size in MiB
            mount_dir: Scratch mount point, relative to the target root
            use_sudo: Passed to FilesystemImage
            filesystem: Filesystem the image is formatted with
        """
        super().__init__(request, profile, **kwargs)
        self.image_path = self.root / image
        self.size_mb = size_mb
        self.mount_dir = self.root / mount_dir
        self.use_sudo = use_sudo
        self.filesystem = filesystem

    @property
    def staging_dir(self):
        return self.root / STAGING_DIR

    def handlers(self) -> dict:
        return {
            Operation.BUILD: self.build,
            Operation.CLEAN: self.clean,
            Operation.CONFIG: self.config,
            Operation.RESET_CONFIG: self.reset_config,
            Operation.GENERATE_INDEX: self.generate_index,
            Operation.INSTALL: self.install,
            Operation.PACKAGE: self.package,
        }

    def build(self) -> PhaseResult:
        with PhaseTimer('build', 'compiling busybox') as result:
            self.make('build')
        return result

    def clean(self) -> PhaseResult:
        """Remove built objects and the packaged image."""
        with PhaseTimer('clean', 'cleaning') as result:
            self.make('clean', 'clean')
            if self.image_path.exists():
                self.image_path.unlink()
                print(f"Removed: {self.image_path}")
        return result

    def config(self):
        self.make('config', 'menuconfig')

    def install(self) -> PhaseResult:
        """Install into the staging tree and add the rootfs skeleton."""
        with PhaseTimer('install', 'installing') as result:
            self.make('install', 'install')
            if self.staging_dir.is_dir():
                etc_dir = self.root / 'etc'
                if etc_dir.is_dir():
                    shutil.copytree(etc_dir, self.staging_dir / 'etc',
                                    dirs_exist_ok=True)
                for name in ROOTFS_DIRS:
                    (self.staging_dir / name).mkdir(exist_ok=True)
        return result

    def packaging_spec(self) -> PackagingSpec:
        return PackagingSpec(
            staging_dir=self.staging_dir,
            image_path=self.image_path,
            size_mb=self.size_mb,
            mount_dir=self.mount_dir,
            filesystem=self.filesystem,
        )

    def package(self) -> PhaseResult:
        """Turn the staging tree into a mountable filesystem image."""
        spec = self.packaging_spec()
        with PhaseTimer('ext4', f'creating {spec.image_path.name}') as result:
            FilesystemImage(spec, use_sudo=self.use_sudo).package()
        return result


COOKS = {
    TargetKind.KERNEL: KernelCook,
    TargetKind.BUSYBOX: BusyboxCook,
}


def dispatch(request: BuildRequest, profile: EnvironmentProfile,
             **options) -> PhaseResult:
    """Run the single phase a request asks for.

    Args:
        request: Validated build request
        profile: Resolved build environment
        **options: Passed to the cook class for the request's target kind

    Returns:
        The phase result, or None for untimed (interactive) phases
    """
    cook = COOKS[request.target_kind](request, profile, **options)
    return cook.run()
