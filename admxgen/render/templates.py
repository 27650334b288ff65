"""
Templates and fixed source sections for the generated C# library.

POLICY_TEMPLATE and SUPPLEMENT_TEMPLATE are Jinja2 templates; the section
constants are emitted verbatim inside the supplement. The runtime types
live in the nested ``Runtime`` namespace and are imported by every policy
namespace.
"""

from .. import __version__

RUNTIME_NAMESPACE = "Runtime"

BANNER = f"""// <auto-generated>
//     This code was generated by admxgen {__version__}.
//
//     Changes to this file may cause incorrect behavior and will be lost if
//     the code is regenerated.
// </auto-generated>"""

PRAGMA = "#pragma warning disable CS0219, CS1591, CS8019"

USING_REFERENCES = "\n".join([
    "using global::System;",
    "using global::System.Collections.Generic;",
    "using global::System.Globalization;",
    "using global::System.Runtime.InteropServices;",
    "using global::System.Text;",
])

# Members every generated policy class declares or inherits; element properties must not reuse them.
RESERVED_MEMBERS = (
    "Name", "DisplayName", "ResourceId", "Namespace", "SupportedOn", "Class",
    "RegistryKey", "RegistryValueName", "EnabledValue", "DisabledValue",
    "Elements", "GetValues", "PolicyName", "ElementList",
    "Equals", "GetHashCode", "GetType", "ToString", "MemberwiseClone", "Finalize",
)

# Types declared in the runtime namespace; policy classes must not shadow them.
RUNTIME_TYPES = (
    "PolicyClass", "PolicyState", "PolicyElementKind", "RegistryValueKind",
    "PolicyElement", "PolicyValue", "IPolicyDefinition", "IPolicyValueSource",
    "GroupPolicySection", "GroupPolicyObject", "GroupPolicyMethods",
    "NativeMethods", "IGroupPolicyObject", "GroupPolicyObjectClass", "Helpers",
)

# Policy classes renamed away from a reserved member or runtime type get this suffix.
CLASS_NAME_SUFFIX = "Policy"


POLICY_TEMPLATE = r"""
{% set rt = "global::" ~ runtime_namespace %}
{% set scg = "global::System.Collections.Generic" %}
{% set class_name = escape_type(policy.name) %}
{% if class_name in reserved_members or class_name in runtime_types %}{% set class_name = class_name ~ class_name_suffix %}{% endif %}
{% set ns = namespace(members=[class_name] + reserved_members, props=[]) %}
{% for item in policy.elements %}
{% set prop = escape_identifier(item.id) %}
{% if [prop, prop ~ "Element", prop ~ "Option", prop ~ "Values"] | select("in", ns.members) | list %}{% set prop = prop ~ "Setting" ~ loop.index0 %}{% endif %}
{% set ns.members = ns.members + [prop, prop ~ "Element", prop ~ "Option", prop ~ "Values"] %}
{% set ns.props = ns.props + [prop] %}
{% endfor %}
namespace {{ escape_namespace(policy.namespace) }}
{
{{ using_references }}
using global::{{ runtime_namespace }};

/// <summary>
{{ escape_xmldoc(policy.display_name or policy.name) }}
/// </summary>
{% if policy.explain_text %}
/// <remarks>
{{ escape_xmldoc(policy.explain_text) }}
/// </remarks>
{% endif %}
public sealed class {{ class_name }} : {{ rt }}.IPolicyDefinition, {{ rt }}.IPolicyValueSource
{
public const string PolicyName = {{ literal(policy.name) }};
public const string ResourceId = {{ literal(ref_id(policy.display_name_ref)) }};

{% for item in policy.elements %}
{% set prop = ns.props[loop.index0] %}
{% set key = item.registry_key or policy.registry_key %}
{% if is_bei(item) %}
public static readonly {{ rt }}.PolicyElement {{ prop }}Element = new {{ rt }}.PolicyElement({{ literal(item.id) }}, {{ rt }}.PolicyElementKind.Boolean, {{ literal(key) }}, {{ literal(item.value_name) }});
{% elif is_dei(item) %}
public static readonly {{ rt }}.PolicyElement {{ prop }}Element = new {{ rt }}.PolicyElement({{ literal(item.id) }}, {{ rt }}.PolicyElementKind.Decimal, {{ literal(key) }}, {{ literal(item.value_name) }}, storeAsText: {{ literal(to_dei(item).store_as_text) }});
{% elif is_ldei(item) %}
public static readonly {{ rt }}.PolicyElement {{ prop }}Element = new {{ rt }}.PolicyElement({{ literal(item.id) }}, {{ rt }}.PolicyElementKind.LongDecimal, {{ literal(key) }}, {{ literal(item.value_name) }}, storeAsText: {{ literal(to_ldei(item).store_as_text) }});
{% elif is_eei(item) %}
public static readonly {{ rt }}.PolicyElement {{ prop }}Element = new {{ rt }}.PolicyElement({{ literal(item.id) }}, {{ rt }}.PolicyElementKind.Enumeration, {{ literal(key) }}, {{ literal(item.value_name) }});
{% elif is_lei(item) %}
{% set list_item = to_lei(item) %}
public static readonly {{ rt }}.PolicyElement {{ prop }}Element = new {{ rt }}.PolicyElement({{ literal(item.id) }}, {{ rt }}.PolicyElementKind.List, {{ literal(key) }}, null, expandable: {{ literal(list_item.expandable) }}, valuePrefix: {{ literal(list_item.value_prefix) }}, additive: {{ literal(list_item.additive) }}, explicitValue: {{ literal(list_item.explicit_value) }});
{% elif is_mtei(item) %}
public static readonly {{ rt }}.PolicyElement {{ prop }}Element = new {{ rt }}.PolicyElement({{ literal(item.id) }}, {{ rt }}.PolicyElementKind.MultiText, {{ literal(key) }}, {{ literal(item.value_name) }});
{% elif is_tei(item) %}
public static readonly {{ rt }}.PolicyElement {{ prop }}Element = new {{ rt }}.PolicyElement({{ literal(item.id) }}, {{ rt }}.PolicyElementKind.Text, {{ literal(key) }}, {{ literal(item.value_name) }}, expandable: {{ literal(to_tei(item).expandable) }});
{% else %}
{{ unhandled_element(item) }}
{% endif %}
{% endfor %}

private static readonly {{ rt }}.PolicyElement[] ElementList = new {{ rt }}.PolicyElement[]
{
{% for prop in ns.props %}
{{ prop }}Element,
{% endfor %}
};

public string Name => PolicyName;
public string DisplayName => {{ literal(policy.display_name) }};
public string Namespace => {{ literal(policy.namespace) }};
public string SupportedOn => {{ literal(policy.supported_on) }};
public {{ rt }}.PolicyClass Class => {{ rt }}.{{ literal(policy.policy_class) }};
public string RegistryKey => {{ literal(policy.registry_key) }};
public string RegistryValueName => {{ literal(policy.registry_value_name) }};
public object EnabledValue => {{ literal(policy.enabled_value) if policy.enabled_value is not none else "1u" }};
public object DisabledValue => {{ literal(policy.disabled_value) if policy.disabled_value is not none else "0u" }};
public {{ scg }}.IReadOnlyList<{{ rt }}.PolicyElement> Elements => ElementList;

{% for item in policy.elements %}
{% set prop = ns.props[loop.index0] %}
/// <summary>
{{ escape_xmldoc(item.id) }}
/// </summary>
{% if is_bei(item) %}
public bool? {{ prop }} { get; set; }
{% elif is_dei(item) %}
public uint? {{ prop }} { get; set; }
{% elif is_ldei(item) %}
public ulong? {{ prop }} { get; set; }
{% elif is_eei(item) %}
public {{ prop }}Option? {{ prop }} { get; set; }

public enum {{ prop }}Option
{
{% set options = namespace(names=[]) %}
{% for option in to_eei(item).items %}
{% set option_name = escape_identifier(ref_id(option.display_name_ref) or option.display_name) %}
{% if option_name in options.names %}{% set option_name = option_name ~ "_" ~ loop.index0 %}{% endif %}
{% set options.names = options.names + [option_name] %}
{{ option_name }} = {{ loop.index0 }},
{% endfor %}
}

private static readonly object[] {{ prop }}Values = new object[]
{
{% for option in to_eei(item).items %}
{{ literal(option.value) }},
{% endfor %}
};
{% elif is_lei(item) %}
{% if to_lei(item).explicit_value %}
public {{ scg }}.IDictionary<string, string> {{ prop }} { get; set; }
{% else %}
public {{ scg }}.IList<string> {{ prop }} { get; set; }
{% endif %}
{% elif is_mtei(item) %}
public string[] {{ prop }} { get; set; }
{% elif is_tei(item) %}
public string {{ prop }} { get; set; }
{% endif %}

{% endfor %}
public {{ scg }}.IEnumerable<{{ rt }}.PolicyValue> GetValues()
{
{% for item in policy.elements %}
{% set prop = ns.props[loop.index0] %}
if ({{ prop }} != null)
{
{% if is_bei(item) %}
{% set bool_item = to_bei(item) %}
yield return new {{ rt }}.PolicyValue({{ prop }}Element, {{ prop }}.Value ? (object){{ literal(bool_item.true_value) if bool_item.true_value is not none else "1u" }} : (object){{ literal(bool_item.false_value) if bool_item.false_value is not none else "0u" }});
{% elif is_dei(item) %}
yield return new {{ rt }}.PolicyValue({{ prop }}Element, {{ rt }}.Helpers.EnsureRange({{ prop }}.Value, {{ literal(to_dei(item).min_value) }}, {{ literal(to_dei(item).max_value) }}, nameof({{ prop }})));
{% elif is_ldei(item) %}
yield return new {{ rt }}.PolicyValue({{ prop }}Element, {{ rt }}.Helpers.EnsureRange({{ prop }}.Value, {{ literal(to_ldei(item).min_value) }}, {{ literal(to_ldei(item).max_value) }}, nameof({{ prop }})));
{% elif is_eei(item) %}
yield return new {{ rt }}.PolicyValue({{ prop }}Element, {{ prop }}Values[(int){{ prop }}.Value]);
{% elif is_lei(item) %}
yield return new {{ rt }}.PolicyValue({{ prop }}Element, {{ prop }});
{% elif is_mtei(item) %}
yield return new {{ rt }}.PolicyValue({{ prop }}Element, {{ rt }}.Helpers.EnsureStrings({{ prop }}, {{ to_mtei(item).max_length }}, {{ to_mtei(item).max_strings }}, nameof({{ prop }})));
{% elif is_tei(item) %}
yield return new {{ rt }}.PolicyValue({{ prop }}Element, {{ rt }}.Helpers.EnsureLength({{ prop }}, {{ to_tei(item).max_length }}, nameof({{ prop }})));
{% endif %}
}
{% if item.required is defined and item.required %}
else
{
throw new global::System.InvalidOperationException(string.Format(global::System.Globalization.CultureInfo.InvariantCulture, "'{0}' is required.", nameof({{ prop }})));
}
{% endif %}
{% endfor %}
yield break;
}
}
}
"""


SUPPLEMENT_TEMPLATE = r"""
namespace {{ runtime_name }}
{
{{ using_references }}

{{ body }}
}
"""


BASE_MODELS = r"""
public enum PolicyClass
{
    Machine = 1,
    User = 2,
    Both = 3,
}

public enum PolicyState
{
    NotConfigured = 0,
    Enabled = 1,
    Disabled = 2,
}

public enum PolicyElementKind
{
    Boolean,
    Decimal,
    LongDecimal,
    Enumeration,
    List,
    MultiText,
    Text,
}

public enum RegistryValueKind
{
    None = 0,
    String = 1,
    ExpandString = 2,
    DWord = 4,
    MultiString = 7,
    QWord = 11,
}

/// <summary>
/// Describes where one configurable element of a policy is stored.
/// </summary>
public sealed class PolicyElement
{
    public PolicyElement(string id, PolicyElementKind kind, string registryKey, string valueName,
        bool expandable = false, bool storeAsText = false, string valuePrefix = null,
        bool additive = false, bool explicitValue = false)
    {
        if (id == null)
            throw new ArgumentNullException(nameof(id));

        Id = id;
        Kind = kind;
        RegistryKey = registryKey;
        ValueName = valueName;
        Expandable = expandable;
        StoreAsText = storeAsText;
        ValuePrefix = valuePrefix;
        Additive = additive;
        ExplicitValue = explicitValue;
    }

    public string Id { get; }
    public PolicyElementKind Kind { get; }
    public string RegistryKey { get; }
    public string ValueName { get; }
    public bool Expandable { get; }
    public bool StoreAsText { get; }
    public string ValuePrefix { get; }
    public bool Additive { get; }
    public bool ExplicitValue { get; }

    public override string ToString() => Id;
}

/// <summary>
/// A value chosen for one policy element. A null value removes the registry value.
/// </summary>
public sealed class PolicyValue
{
    public PolicyValue(PolicyElement element, object value)
    {
        if (element == null)
            throw new ArgumentNullException(nameof(element));

        Element = element;
        Value = value;
    }

    public PolicyElement Element { get; }
    public object Value { get; }
}
"""


BASE_INTERFACES = r"""
/// <summary>
/// Static description of a policy setting.
/// </summary>
public interface IPolicyDefinition
{
    string Name { get; }
    string DisplayName { get; }
    string Namespace { get; }
    string SupportedOn { get; }
    PolicyClass Class { get; }
    string RegistryKey { get; }
    string RegistryValueName { get; }
    object EnabledValue { get; }
    object DisabledValue { get; }
    IReadOnlyList<PolicyElement> Elements { get; }
}

/// <summary>
/// Supplies the element values written when a policy is enabled.
/// </summary>
public interface IPolicyValueSource
{
    IEnumerable<PolicyValue> GetValues();
}
"""


GROUP_POLICY_OBJECT = r"""
public enum GroupPolicySection
{
    Root = 0,
    User = 1,
    Machine = 2,
}

/// <summary>
/// The local Group Policy object.
/// </summary>
public sealed class GroupPolicyObject : IDisposable
{
    private static readonly Guid RegistryExtensionGuid = new Guid("35378EAC-683F-11D2-A89A-00C04FBBCFA2");
    private static readonly Guid SnapInGuid = new Guid("8FC0B734-A0E1-11D1-A7D3-0000F87571E3");

    private IGroupPolicyObject _gpo;

    private GroupPolicyObject(IGroupPolicyObject gpo)
    {
        _gpo = gpo;
    }

    public static GroupPolicyObject OpenLocalMachine(bool readOnly = false)
    {
        var gpo = (IGroupPolicyObject)new GroupPolicyObjectClass();
        gpo.OpenLocalMachineGPO(readOnly ? NativeMethods.GPO_OPEN_READ_ONLY : NativeMethods.GPO_OPEN_LOAD_REGISTRY);
        return new GroupPolicyObject(gpo);
    }

    internal IntPtr GetRegistryKey(GroupPolicySection section)
    {
        EnsureNotDisposed();
        IntPtr key;
        _gpo.GetRegistryKey((uint)section, out key);
        return key;
    }

    public void Save(bool machine)
    {
        EnsureNotDisposed();
        _gpo.Save(machine, true, RegistryExtensionGuid, SnapInGuid);
    }

    public void Dispose()
    {
        if (_gpo == null)
            return;

        Marshal.ReleaseComObject(_gpo);
        _gpo = null;
    }

    private void EnsureNotDisposed()
    {
        if (_gpo == null)
            throw new ObjectDisposedException(nameof(GroupPolicyObject));
    }
}
"""


GROUP_POLICY_METHODS = r"""
public static class GroupPolicyMethods
{
    public static void SetPolicy(this GroupPolicyObject gpo, IPolicyDefinition policy, PolicyState state)
        => SetPolicy(gpo, policy, state, policy as IPolicyValueSource);

    public static void SetPolicy(this GroupPolicyObject gpo, IPolicyDefinition policy, PolicyState state, IPolicyValueSource values)
    {
        if (gpo == null)
            throw new ArgumentNullException(nameof(gpo));
        if (policy == null)
            throw new ArgumentNullException(nameof(policy));

        if (policy.Class == PolicyClass.Machine || policy.Class == PolicyClass.Both)
            Apply(gpo, GroupPolicySection.Machine, policy, state, values);
        if (policy.Class == PolicyClass.User || policy.Class == PolicyClass.Both)
            Apply(gpo, GroupPolicySection.User, policy, state, values);
    }

    private static void Apply(GroupPolicyObject gpo, GroupPolicySection section, IPolicyDefinition policy, PolicyState state, IPolicyValueSource values)
    {
        var root = gpo.GetRegistryKey(section);
        try
        {
            switch (state)
            {
                case PolicyState.Enabled:
                    WriteValue(root, policy.RegistryKey, policy.RegistryValueName, policy.EnabledValue, false);
                    if (values != null)
                    {
                        foreach (var value in values.GetValues())
                            WriteElement(root, policy, value);
                    }
                    break;

                case PolicyState.Disabled:
                    WriteValue(root, policy.RegistryKey, policy.RegistryValueName, policy.DisabledValue, false);
                    RemoveElements(root, policy);
                    break;

                default:
                    RemoveValue(root, policy.RegistryKey, policy.RegistryValueName);
                    RemoveElements(root, policy);
                    break;
            }
        }
        finally
        {
            NativeMethods.RegCloseKey(root);
        }

        gpo.Save(section == GroupPolicySection.Machine);
    }

    private static void RemoveElements(IntPtr root, IPolicyDefinition policy)
    {
        foreach (var element in policy.Elements)
        {
            var keyPath = string.IsNullOrEmpty(element.RegistryKey) ? policy.RegistryKey : element.RegistryKey;
            if (element.Kind == PolicyElementKind.List)
                NativeMethods.RegDeleteTree(root, keyPath);
            else
                RemoveValue(root, keyPath, element.ValueName);
        }
    }

    private static void WriteElement(IntPtr root, IPolicyDefinition policy, PolicyValue value)
    {
        var element = value.Element;
        var keyPath = string.IsNullOrEmpty(element.RegistryKey) ? policy.RegistryKey : element.RegistryKey;

        if (element.Kind == PolicyElementKind.List)
        {
            WriteList(root, keyPath, element, value.Value);
            return;
        }

        var payload = value.Value;
        if (element.StoreAsText && payload != null && !(payload is string))
            payload = Convert.ToString(payload, CultureInfo.InvariantCulture);
        WriteValue(root, keyPath, element.ValueName, payload, element.Expandable);
    }

    private static void WriteList(IntPtr root, string keyPath, PolicyElement element, object value)
    {
        if (!element.Additive)
            NativeMethods.RegDeleteTree(root, keyPath);

        var dictionary = value as IDictionary<string, string>;
        if (dictionary != null)
        {
            foreach (var pair in dictionary)
                WriteValue(root, keyPath, pair.Key, pair.Value, element.Expandable);
            return;
        }

        var items = value as IEnumerable<string>;
        if (items == null)
            throw new ArgumentException("List elements require a string sequence or a string dictionary.", nameof(value));

        var index = 1;
        foreach (var item in items)
        {
            var valueName = string.IsNullOrEmpty(element.ValuePrefix)
                ? item
                : element.ValuePrefix + index.ToString(CultureInfo.InvariantCulture);
            WriteValue(root, keyPath, valueName, item, element.Expandable);
            index++;
        }
    }

    private static void WriteValue(IntPtr root, string keyPath, string valueName, object value, bool expandable)
    {
        if (valueName == null)
            return;

        if (value == null)
        {
            RemoveValue(root, keyPath, valueName);
            return;
        }

        IntPtr key;
        Helpers.Check(NativeMethods.RegCreateKeyEx(root, keyPath, 0, null, 0, NativeMethods.KEY_WRITE, IntPtr.Zero, out key, IntPtr.Zero), keyPath);
        try
        {
            RegistryValueKind kind;
            var data = Helpers.ToRegistryData(value, expandable, out kind);
            Helpers.Check(NativeMethods.RegSetValueEx(key, valueName, 0, (uint)kind, data, (uint)data.Length), valueName);
        }
        finally
        {
            NativeMethods.RegCloseKey(key);
        }
    }

    private static void RemoveValue(IntPtr root, string keyPath, string valueName)
    {
        if (valueName == null)
            return;

        IntPtr key;
        if (NativeMethods.RegOpenKeyEx(root, keyPath, 0, NativeMethods.KEY_WRITE, out key) != 0)
            return;

        try
        {
            NativeMethods.RegDeleteValue(key, valueName);
        }
        finally
        {
            NativeMethods.RegCloseKey(key);
        }
    }
}
"""


INTEROP_CODES = r"""
internal static class NativeMethods
{
    internal const uint GPO_OPEN_LOAD_REGISTRY = 0x00000001;
    internal const uint GPO_OPEN_READ_ONLY = 0x00000002;
    internal const uint KEY_WRITE = 0x00020006;

    [DllImport("advapi32.dll", CharSet = CharSet.Unicode, EntryPoint = "RegCreateKeyExW")]
    internal static extern int RegCreateKeyEx(IntPtr hKey, string subKey, uint reserved, string className,
        uint options, uint samDesired, IntPtr securityAttributes, out IntPtr result, IntPtr disposition);

    [DllImport("advapi32.dll", CharSet = CharSet.Unicode, EntryPoint = "RegOpenKeyExW")]
    internal static extern int RegOpenKeyEx(IntPtr hKey, string subKey, uint options, uint samDesired, out IntPtr result);

    [DllImport("advapi32.dll", CharSet = CharSet.Unicode, EntryPoint = "RegSetValueExW")]
    internal static extern int RegSetValueEx(IntPtr hKey, string valueName, uint reserved, uint type, byte[] data, uint dataLength);

    [DllImport("advapi32.dll", CharSet = CharSet.Unicode, EntryPoint = "RegDeleteValueW")]
    internal static extern int RegDeleteValue(IntPtr hKey, string valueName);

    [DllImport("advapi32.dll", CharSet = CharSet.Unicode, EntryPoint = "RegDeleteTreeW")]
    internal static extern int RegDeleteTree(IntPtr hKey, string subKey);

    [DllImport("advapi32.dll")]
    internal static extern int RegCloseKey(IntPtr hKey);
}

[ComImport]
[Guid("EA502722-A23D-11D1-A7D3-0000F87571E3")]
[InterfaceType(ComInterfaceType.InterfaceIsIUnknown)]
internal interface IGroupPolicyObject
{
    void New([MarshalAs(UnmanagedType.LPWStr)] string domainName, [MarshalAs(UnmanagedType.LPWStr)] string displayName, uint flags);
    void OpenDSGPO([MarshalAs(UnmanagedType.LPWStr)] string path, uint flags);
    void OpenLocalMachineGPO(uint flags);
    void OpenRemoteMachineGPO([MarshalAs(UnmanagedType.LPWStr)] string computerName, uint flags);
    void Save([MarshalAs(UnmanagedType.Bool)] bool machine, [MarshalAs(UnmanagedType.Bool)] bool add,
        [MarshalAs(UnmanagedType.LPStruct)] Guid extension, [MarshalAs(UnmanagedType.LPStruct)] Guid app);
    void Delete();
    void GetName([MarshalAs(UnmanagedType.LPWStr)] StringBuilder name, int maxLength);
    void GetDisplayName([MarshalAs(UnmanagedType.LPWStr)] StringBuilder name, int maxLength);
    void SetDisplayName([MarshalAs(UnmanagedType.LPWStr)] string name);
    void GetPath([MarshalAs(UnmanagedType.LPWStr)] StringBuilder path, int maxPath);
    void GetDSPath(uint section, [MarshalAs(UnmanagedType.LPWStr)] StringBuilder path, int maxPath);
    void GetFileSysPath(uint section, [MarshalAs(UnmanagedType.LPWStr)] StringBuilder path, int maxPath);
    void GetRegistryKey(uint section, out IntPtr key);
    uint GetOptions();
    void SetOptions(uint options, uint mask);
    void GetGpoType(out int gpoType);
    void GetMachineName([MarshalAs(UnmanagedType.LPWStr)] StringBuilder name, int maxLength);
    uint GetPropertySheetPages(out IntPtr pages);
}

[ComImport]
[Guid("EA502723-A23D-11D1-A7D3-0000F87571E3")]
internal class GroupPolicyObjectClass
{
}
"""


HELPER_CODES = r"""
internal static class Helpers
{
    internal static void Check(int result, string name)
    {
        if (result != 0)
            throw new InvalidOperationException(string.Format(CultureInfo.InvariantCulture,
                "Registry operation on '{0}' failed with error {1}.", name, result));
    }

    internal static byte[] ToRegistryData(object value, bool expandable, out RegistryValueKind kind)
    {
        if (value is uint)
        {
            kind = RegistryValueKind.DWord;
            return BitConverter.GetBytes((uint)value);
        }

        if (value is ulong)
        {
            kind = RegistryValueKind.QWord;
            return BitConverter.GetBytes((ulong)value);
        }

        var text = value as string;
        if (text != null)
        {
            kind = expandable ? RegistryValueKind.ExpandString : RegistryValueKind.String;
            return Encoding.Unicode.GetBytes(text + "\0");
        }

        var lines = value as IEnumerable<string>;
        if (lines != null)
        {
            kind = RegistryValueKind.MultiString;
            return Encoding.Unicode.GetBytes(string.Join("\0", lines) + "\0\0");
        }

        throw new ArgumentException("Unsupported registry value type.", nameof(value));
    }

    internal static uint EnsureRange(uint value, uint minValue, uint maxValue, string name)
    {
        if (value < minValue || value > maxValue)
            throw new ArgumentOutOfRangeException(name, value, "Value is outside the permitted range.");
        return value;
    }

    internal static ulong EnsureRange(ulong value, ulong minValue, ulong maxValue, string name)
    {
        if (value < minValue || value > maxValue)
            throw new ArgumentOutOfRangeException(name, value, "Value is outside the permitted range.");
        return value;
    }

    internal static string EnsureLength(string value, int maxLength, string name)
    {
        if (value.Length > maxLength)
            throw new ArgumentOutOfRangeException(name, value.Length, "Text is longer than permitted.");
        return value;
    }

    internal static string[] EnsureStrings(string[] values, int maxLength, int maxStrings, string name)
    {
        if (maxStrings > 0 && values.Length > maxStrings)
            throw new ArgumentOutOfRangeException(name, values.Length, "Too many strings.");
        foreach (var value in values)
            EnsureLength(value, maxLength, name);
        return values;
    }
}
"""


SUPPLEMENT_SECTIONS = (
    BASE_MODELS,
    BASE_INTERFACES,
    GROUP_POLICY_OBJECT,
    GROUP_POLICY_METHODS,
    INTEROP_CODES,
    HELPER_CODES,
)
