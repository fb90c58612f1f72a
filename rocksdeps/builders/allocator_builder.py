"""
Autotools builder for the memory allocator
"""

from typing import Dict, List

from .base_builder import BaseBuilder, ArtifactLocations


class AllocatorBuilder(BaseBuilder):
    """Builds jemalloc: generate, configure, make, make install"""

    def build_configuration(self) -> Dict[str, str]:
        configuration = {
            "debug": "disabled",
            "symbolPrefix": "",
        }
        configuration.update(self.settings)
        configuration["installPrefix"] = str(self.install_dir)
        return configuration

    def configure_args(self, configuration: Dict[str, str]) -> List[str]:
        args = []
        if configuration.get("debug") == "disabled":
            args.append("--disable-debug")
        else:
            args.append("--enable-debug")
        args.append(f"--prefix={configuration['installPrefix']}")
        # Emitted even when empty; omitting the flag is a different configuration
        args.append(f"--with-jemalloc-prefix={configuration['symbolPrefix']}")
        args.extend(self.config.get("extra_configure_args", []))
        return args

    def generate(self) -> None:
        """Generate the configure script"""
        cmd = self.config.get("generate_command") or ["autoconf"]
        self.logger.info(f"Generating build scripts for {self.name}...")
        self.run_command(cmd, phase="generate")

    def configure(self) -> None:
        configure_script = self.config.get("configure_script", "./configure")
        cmd = [configure_script] + self.configure_args(self.build_configuration())
        self.logger.info(f"Configuring {self.name}...")
        self.run_command(cmd, phase="configure")

    def build(self) -> None:
        self.logger.info(f"Building {self.name}...")
        self.run_command(["make", f"-j{self.jobs}"], phase="compile")

    def install(self) -> None:
        self.logger.info(f"Installing {self.name}...")
        self.run_command(["make", "install"], phase="install")

    def execute(self) -> ArtifactLocations:
        self.logger.info(f"Building {self.name} into {self.install_dir}...")
        self.generate()
        self.configure()
        self.build()
        self.install()
        self.logger.success(f"Successfully built {self.name}")
        return self.locations()

    def clean(self) -> None:
        # Nothing to clean before the first configure
        if not (self.source_dir / "Makefile").exists():
            self.logger.debug(f"No Makefile in {self.source_dir}, skipping clean")
            return
        super().clean()
