"""Shared pytest fixtures: a consumer project and the upstream module manifests."""

from pathlib import Path

import pytest

from fullsource.errors import FetchError

CONSUMER_POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 http://maven.apache.org/maven-v4_0_0.xsd">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.mycompany.app</groupId>
    <artifactId>myproject</artifactId>
    <packaging>war</packaging>
    <version>1.0-SNAPSHOT</version>
    <name>AppFuse Struts 2 Application</name>

    <build>
        <plugins>
            <plugin>
                <groupId>org.appfuse</groupId>
                <artifactId>maven-warpath-plugin</artifactId>
                <version>2.0</version>
                <extensions>true</extensions>
            </plugin>
            <plugin>
                <artifactId>maven-compiler-plugin</artifactId>
                <configuration>
                    <source>1.5</source>
                </configuration>
                <dependencies>
                    <dependency>
                        <groupId>org.codehaus.plexus</groupId>
                        <artifactId>plexus-compiler-javac</artifactId>
                        <version>1.5.3</version>
                    </dependency>
                </dependencies>
            </plugin>
        </plugins>
    </build>

    <!-- keep this comment -->
    <dependencies>
        <dependency>
            <groupId>org.appfuse</groupId>
            <artifactId>appfuse-struts</artifactId>
            <version>${appfuse.version}</version>
            <type>warpath</type>
        </dependency>
        <dependency>
            <groupId>org.appfuse</groupId>
            <artifactId>appfuse-hibernate</artifactId>
            <version>${appfuse.version}</version>
        </dependency>
        <dependency>
            <groupId>${jdbc.groupId}</groupId>
            <artifactId>${jdbc.artifactId}</artifactId>
            <version>${jdbc.version}</version>
        </dependency>
        <dependency>
            <groupId>junit</groupId>
            <artifactId>junit</artifactId>
            <version>${junit.version}</version>
            <scope>test</scope>
        </dependency>
    </dependencies>

    <properties>
        <dao.framework>hibernate</dao.framework>
        <web.framework>struts</web.framework>
        <amp.fullSource>false</amp.fullSource>
        <appfuse.version>2.0-SNAPSHOT</appfuse.version>
        <jdbc.groupId>mysql</jdbc.groupId>
        <jdbc.artifactId>mysql-connector-java</jdbc.artifactId>
        <jdbc.version>5.0.5</jdbc.version>
        <junit.version>3.8.1</junit.version>
    </properties>
</project>
"""

ROOT_POM = """\
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <groupId>org.appfuse</groupId>
    <artifactId>appfuse</artifactId>
    <packaging>pom</packaging>
    <dependencies>
        <dependency>
            <groupId>junit</groupId>
            <artifactId>junit</artifactId>
            <version>4.4</version>
            <scope>test</scope>
        </dependency>
        <dependency>
            <groupId>jmock</groupId>
            <artifactId>jmock</artifactId>
            <version>${jmock.version}</version>
            <scope>test</scope>
        </dependency>
        <dependency>
            <groupId>log4j</groupId>
            <artifactId>log4j</artifactId>
            <version>${log4j.version}</version>
        </dependency>
    </dependencies>
    <properties>
        <hibernate.version>3.2.5.ga</hibernate.version>
        <jmock.version>1.1.0</jmock.version>
        <junit.version>4.4</junit.version>
        <log4j.version>1.2.14</log4j.version>
        <spring.version>2.0.6</spring.version>
        <struts.version>2.0.9</struts.version>
        <jdbc.url><![CDATA[jdbc:mysql://localhost/db?createDatabaseIfNotExist=true&amp;useUnicode=true]]></jdbc.url>
    </properties>
</project>
"""

HIBERNATE_POM = """\
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <artifactId>appfuse-hibernate</artifactId>
    <dependencies>
        <dependency>
            <groupId>org.appfuse</groupId>
            <artifactId>appfuse-data-common</artifactId>
            <version>${pom.version}</version>
        </dependency>
        <dependency>
            <groupId>org.hibernate</groupId>
            <artifactId>hibernate</artifactId>
            <version>${hibernate.version}</version>
            <exclusions>
                <exclusion>
                    <groupId>javax.transaction</groupId>
                    <artifactId>jta</artifactId>
                </exclusion>
            </exclusions>
        </dependency>
        <dependency>
            <groupId>org.springframework</groupId>
            <artifactId>spring</artifactId>
            <version>${spring.version}</version>
        </dependency>
    </dependencies>
</project>
"""

SERVICE_POM = """\
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <artifactId>appfuse-service</artifactId>
    <dependencies>
        <dependency>
            <groupId>org.appfuse</groupId>
            <artifactId>appfuse-hibernate</artifactId>
            <version>${pom.version}</version>
        </dependency>
        <dependency>
            <groupId>org.springframework</groupId>
            <artifactId>spring-mock</artifactId>
            <version>${spring.version}</version>
            <scope>test</scope>
        </dependency>
        <dependency>
            <groupId>org.springframework</groupId>
            <artifactId>spring</artifactId>
            <version>2.5</version>
        </dependency>
    </dependencies>
</project>
"""

WEB_COMMON_POM = """\
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <artifactId>appfuse-web-common</artifactId>
    <dependencies>
        <dependency>
            <groupId>org.appfuse</groupId>
            <artifactId>appfuse-service</artifactId>
            <version>${pom.version}</version>
        </dependency>
        <dependency>
            <groupId>javax.servlet</groupId>
            <artifactId>servlet-api</artifactId>
            <version>2.4</version>
            <scope>provided</scope>
        </dependency>
        <dependency>
            <groupId>org.springframework</groupId>
            <artifactId>spring-mock</artifactId>
            <version>2.0.8</version>
            <scope>test</scope>
        </dependency>
    </dependencies>
</project>
"""

STRUTS_POM = """\
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <artifactId>appfuse-struts</artifactId>
    <packaging>war</packaging>
    <build>
        <plugins>
            <plugin>
                <groupId>org.appfuse</groupId>
                <artifactId>maven-warpath-plugin</artifactId>
                <version>2.0</version>
            </plugin>
        </plugins>
    </build>
    <dependencies>
        <dependency>
            <groupId>${pom.groupId}</groupId>
            <artifactId>struts-resources</artifactId>
            <version>${pom.version}</version>
            <type>warpath</type>
        </dependency>
        <dependency>
            <groupId>org.apache.struts</groupId>
            <artifactId>struts2-core</artifactId>
            <version>${struts.version}</version>
        </dependency>
    </dependencies>
</project>
"""


@pytest.fixture
def consumer_pom() -> str:
    return CONSUMER_POM


@pytest.fixture
def module_manifests() -> dict[str, str]:
    """Module manifests keyed by their location under the tag."""
    return {
        "pom.xml": ROOT_POM,
        "data/hibernate/pom.xml": HIBERNATE_POM,
        "service/pom.xml": SERVICE_POM,
        "web/common/pom.xml": WEB_COMMON_POM,
        "web/struts/pom.xml": STRUTS_POM,
    }


class FakeManifestSource:
    """In-memory manifest source that records every fetch."""

    def __init__(self, manifests: dict[str, str]) -> None:
        self.manifests = manifests
        self.fetched: list[str] = []

    def fetch_manifest(self, location: str) -> str:
        self.fetched.append(location)
        if location not in self.manifests:
            raise FetchError(f"unable to fetch {location}", ["404 Not Found"])
        return self.manifests[location]


class FakeExporter:
    """Records exports; optionally drops files into the destination."""

    def __init__(self, files: dict[str, dict[str, str]] | None = None) -> None:
        self.calls: list[tuple[str, Path]] = []
        self.files = files or {}

    def export(self, remote_location: str, destination: Path) -> None:
        self.calls.append((remote_location, destination))
        for suffix, tree in self.files.items():
            if remote_location.endswith(suffix):
                for relative, content in tree.items():
                    target = destination / relative
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_text(content)


@pytest.fixture
def fake_source(module_manifests) -> FakeManifestSource:
    return FakeManifestSource(module_manifests)


@pytest.fixture
def fake_exporter() -> FakeExporter:
    return FakeExporter()


@pytest.fixture
def project_dir(tmp_path, consumer_pom) -> Path:
    project = tmp_path / "myproject"
    project.mkdir()
    (project / "pom.xml").write_text(consumer_pom)
    return project


@pytest.fixture
def make_exporter():
    return FakeExporter
