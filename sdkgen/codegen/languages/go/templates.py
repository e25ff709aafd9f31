"""
Jinja2 templates for the Go backend.
"""

HEADER = "// Code generated by sdkgen. DO NOT EDIT.\n"

CLIENT_TEMPLATE = """{{ header }}
package {{ package_name }}

// SchemaVersion is the version of the API this client was generated from.
const SchemaVersion = "{{ schema_version }}"

{% for scalar in scalars %}
{% if scalar.description %}
{{ scalar.description | comment }}
{% endif %}
type {{ scalar.name }} string

{% endfor %}
{% for enum in enums %}
{% if enum.description %}
{{ enum.description | comment }}
{% endif %}
type {{ enum.name }} string

const (
{% for value in enum["values"] %}
{% if value.description %}
{{ value.description | comment | indent_lines(tabs=True) }}
{% endif %}
	{{ value.const_name }} {{ enum.name }} = "{{ value.name }}"
{% endfor %}
)

{% endfor %}
{% for union in unions %}
{% if union.description %}
{{ union.description | comment }}
{% endif %}
// {{ union.name }} is one of: {{ union.members | join(", ") }}.
type {{ union.name }} = any

{% endfor %}
{% for struct in structs %}
{% if struct.description %}
{{ struct.description | comment }}
{% endif %}
type {{ struct.name }} struct {
{% for field in struct.fields %}
{% if field.description %}
{{ field.description | comment | indent_lines(tabs=True) }}
{% endif %}
	{{ field.name }} {{ field.type }} `json:"{{ field.json_name }}{% if field.omitempty %},omitempty{% endif %}"`
{% endfor %}
}

{% endfor %}
{% if bundle_dependencies %}
{% include "deps_block.go.j2" %}
{% endif %}
"""

DEPS_TEMPLATE = """{{ header }}
package {{ package_name }}

{% include "deps_block.go.j2" %}
"""

DEPS_BLOCK_TEMPLATE = """// ModuleDependency is a module served automatically when the client connects.
type ModuleDependency struct {
	Kind   string
	Name   string
	Pin    string
	Source string
}

// ModuleDependencies lists the dependencies to serve, in order.
var ModuleDependencies = []ModuleDependency{
{% for dep in dependencies %}
	{Kind: {{ dep.kind | tojson }}, Name: {{ dep.name | tojson }}, Pin: {{ dep.pin | tojson }}, Source: {{ dep.source | tojson }}},
{% endfor %}
}
"""

MODULE_GLUE_TEMPLATE = """{{ header }}
package main

import (
	"{{ module_path }}/internal/sdk"
)

// ModuleName is the name of this module.
const ModuleName = "{{ module_name }}"

// SchemaVersion is the version of the API the module was generated against.
const SchemaVersion = sdk.SchemaVersion

// moduleFunctions lists the functions found in the module source, by object.
var moduleFunctions = map[string][]string{
{% for object in objects %}
	"{{ object.name }}": { {%- for method in object.methods %}"{{ method }}"{% if not loop.last %}, {% endif %}{% endfor -%} },
{% endfor %}
}
"""

STARTER_TEMPLATE = """// A generated module for {{ object_name }} functions

package main

import (
	"context"
	"strings"
)

type {{ object_name }} struct{}

// Returns a greeting for the given name
func (m *{{ object_name }}) Hello(ctx context.Context, name string) string {
	return "Hello, " + strings.TrimSpace(name)
}
"""

GO_MOD_TEMPLATE = """module {{ module_path }}

go {{ go_version }}
"""

GO_TEMPLATES = {
    "sdk.gen.go.j2": CLIENT_TEMPLATE,
    "deps.gen.go.j2": DEPS_TEMPLATE,
    "deps_block.go.j2": DEPS_BLOCK_TEMPLATE,
    "module.gen.go.j2": MODULE_GLUE_TEMPLATE,
    "main.go.j2": STARTER_TEMPLATE,
    "go.mod.j2": GO_MOD_TEMPLATE,
}
