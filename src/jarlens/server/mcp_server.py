"""FastMCP server implementation for jarlens."""

from mcp.server.fastmcp import FastMCP

from jarlens.errors import JarLensError
from jarlens.inspector import MavenInspector
from jarlens.server.formatting import format_detail, format_hits, format_jar_names


def create_mcp_server(inspector: MavenInspector) -> FastMCP:
    """Create an MCP server answering queries through one inspector.

    The inspector's caches live as long as the server process, so repeated
    queries against the same project reuse resolved dependencies and
    indexed jars.

    Args:
        inspector: The composition root owning the caches

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="jarlens",
    )

    @mcp.tool()
    def analyze_pom_dependencies(pom_path: str) -> str:
        """Resolve a pom.xml and list the jar files of its dependencies.

        Args:
            pom_path: Absolute path to the project's pom.xml

        Returns:
            One jar file name per line
        """
        try:
            result = inspector.resolve(pom_path)
        except JarLensError as exc:
            return f"Error: {exc}"
        return format_jar_names(result.jar_paths)

    @mcp.tool()
    def search_class_in_dependencies(pom_path: str, class_name_query: str) -> str:
        """Search every dependency jar for classes by name.

        Args:
            pom_path: Absolute path to the project's pom.xml
            class_name_query: Part of a class name, or a pattern with * wildcards
                that must match the whole simple or qualified name

        Returns:
            Up to 20 matching classes with the jar containing each
        """
        try:
            hits = inspector.search_classes(pom_path, class_name_query)
        except JarLensError as exc:
            return f"Error: {exc}"
        return format_hits(hits, class_name_query)

    @mcp.tool()
    def search_method_in_dependencies(pom_path: str, method_name: str) -> str:
        """Search every dependency jar for classes declaring a method.

        Args:
            pom_path: Absolute path to the project's pom.xml
            method_name: Part of a method name, or a pattern with * wildcards

        Returns:
            Up to 50 classes declaring a matching method
        """
        try:
            hits = inspector.search_methods(pom_path, method_name)
        except JarLensError as exc:
            return f"Error: {exc}"
        return format_hits(hits, method_name)

    @mcp.tool()
    def inspect_java_class(jar_path: str, full_class_name: str, include_source: bool = False) -> str:
        """Show the structure of a class: package, imports, fields and methods.

        Args:
            jar_path: Absolute path to the jar containing the class
            full_class_name: Fully qualified class name, e.g. com.example.MyClass
            include_source: Append the recovered source text

        Returns:
            Class structure, or an error line if no source could be recovered
        """
        return format_detail(inspector.inspect(jar_path, full_class_name), include_source)

    @mcp.tool()
    def inspect_class_by_name(full_class_name: str, include_source: bool = False) -> str:
        """Inspect a class found in any previously analyzed project's dependencies.

        Args:
            full_class_name: Fully qualified class name, e.g. com.example.MyClass
            include_source: Append the recovered source text
        """
        return format_detail(inspector.inspect_by_name(full_class_name), include_source)

    @mcp.tool()
    def find_method_usage(full_class_name: str, normalized_definition: str) -> str:
        """Find classes in analyzed dependencies that reference a method.

        Args:
            full_class_name: Class declaring the method, e.g. com.example.OrderService
            normalized_definition: Method key as shown by inspect_java_class,
                e.g. place(OrderDto)

        Returns:
            Up to 50 classes whose bytecode references the method
        """
        hits = inspector.find_method_usage(full_class_name, normalized_definition)
        return format_hits(hits, f"{full_class_name}.{normalized_definition}")

    @mcp.resource("jarlens://logs")
    def logs() -> str:
        """Contents of the jarlens log file."""
        log_file = inspector.config.log_file
        if log_file.exists():
            return log_file.read_text(encoding="utf-8", errors="replace")
        return "Log file not found."

    @mcp.resource("jarlens://dependency-cache")
    def dependency_cache() -> str:
        """Raw JSON of the dependency cache."""
        cache_file = inspector.dependencies.path
        if cache_file.exists():
            return cache_file.read_text(encoding="utf-8")
        return "Cache file not found."

    @mcp.prompt(name="analyze-project")
    def analyze_project(pom_path: str) -> str:
        """Guide the user through analyzing a Java project from its pom.xml."""
        return (
            f"Please analyze the dependencies for the project at {pom_path} "
            "and search for any critical classes."
        )

    return mcp
